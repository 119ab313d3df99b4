"""Tests for the Registrant model and event identifier helpers."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from waitlist.models import Registrant, format_event_id, parse_event_number
from tests.factories.registrant import RegistrantFactory


class TestEventIdFormatting:
    def test_pads_to_four_digits(self):
        assert format_event_id(1) == "edo-ahapn-0001"
        assert format_event_id(42) == "edo-ahapn-0042"

    def test_wide_numbers_are_not_truncated(self):
        assert format_event_id(12345) == "edo-ahapn-12345"

    def test_custom_prefix_and_width(self):
        assert format_event_id(7, prefix="x-", width=2) == "x-07"

    def test_rejects_non_positive_numbers(self):
        with pytest.raises(ValueError):
            format_event_id(0)

    @pytest.mark.parametrize(
        "event_id, expected",
        [
            ("edo-ahapn-0001", 1),
            ("edo-ahapn-10000", 10000),
            ("edo-ahapn-", None),
            ("other-0001", None),
            ("edo-ahapn-00a1", None),
            ("", None),
        ],
    )
    def test_parse_event_number(self, event_id, expected):
        assert parse_event_number(event_id) == expected


class TestRegistrant:
    def test_email_normalized(self, session):
        r = RegistrantFactory(email="  Jane.Doe@Example.COM ")
        assert r.email == "jane.doe@example.com"

    def test_email_must_look_like_an_address(self):
        with pytest.raises(ValueError):
            Registrant(email="not-an-email")

    def test_required_text_fields_are_stripped(self):
        r = Registrant(name="  Jane Doe ", phone_number=" 0803 ", state=" Edo ")
        assert (r.name, r.phone_number, r.state) == ("Jane Doe", "0803", "Edo")

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError, match="name is required"):
            Registrant(name="   ")

    def test_email_unique(self, session):
        RegistrantFactory(email="dup@example.com")
        with pytest.raises(IntegrityError):
            RegistrantFactory(email="DUP@example.com")

    def test_event_number_unique(self, session):
        RegistrantFactory(event_number=9001)
        with pytest.raises(IntegrityError):
            RegistrantFactory(event_number=9001, event_id="edo-ahapn-x9001")

    def test_created_at_defaults_on_insert(self, session):
        r = RegistrantFactory()
        session.refresh(r)
        assert r.created_at is not None

    def test_repr_uses_event_id(self):
        r = Registrant(event_id="edo-ahapn-0003")
        assert repr(r) == "<Registrant event_id=edo-ahapn-0003>"
