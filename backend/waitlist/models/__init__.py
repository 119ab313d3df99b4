from waitlist.models.event_counter import EVENT_ID_COUNTER, EventIdCounter
from waitlist.models.registrant import Registrant, format_event_id, parse_event_number
from waitlist.models.registration_code import CodePool, RegistrationCode

__all__ = [
    "EVENT_ID_COUNTER",
    "CodePool",
    "EventIdCounter",
    "Registrant",
    "RegistrationCode",
    "format_event_id",
    "parse_event_number",
]
