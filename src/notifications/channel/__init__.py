"""Channel adapter registry — pluggable email dispatch.

Uses the fake adapter by default; ``EMAIL_ADAPTER=smtp`` selects the SMTP
relay adapter.
"""

from shared.config import get_settings

_email_channel = None


def get_email_channel():
    """Return the configured email adapter (singleton)."""
    global _email_channel
    if _email_channel is None:
        adapter = get_settings().email_adapter
        if adapter == "fake":
            from notifications.channel.fake_email import FakeEmailAdapter

            _email_channel = FakeEmailAdapter()
        elif adapter == "smtp":
            from notifications.channel.smtp_email import SmtpEmailAdapter

            _email_channel = SmtpEmailAdapter()
        else:
            raise ValueError(f"Unknown email adapter: {adapter}")
    return _email_channel


def reset_channels():
    """Reset the channel singleton (useful for testing)."""
    global _email_channel
    _email_channel = None
