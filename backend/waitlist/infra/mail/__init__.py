from .log_notifier import LogOnlyNotifier
from .smtp_notifier import SmtpNotifier

__all__ = ["SmtpNotifier", "LogOnlyNotifier"]
