"""Mailer registry.

Returns one adapter per process, chosen by the ``EMAIL_ADAPTER`` setting:
``fake`` records messages in memory, ``smtp`` relays them.
"""

from clubsupply.mail.email_port import EmailPort
from clubsupply.settings import get_settings

_mailer: EmailPort | None = None


def get_mailer() -> EmailPort:
    global _mailer
    if _mailer is None:
        settings = get_settings()
        if settings.email_adapter == "fake":
            from clubsupply.mail.fake_email import FakeEmailAdapter

            _mailer = FakeEmailAdapter()
        elif settings.email_adapter == "smtp":
            from clubsupply.mail.smtp_email import SMTPEmailAdapter

            _mailer = SMTPEmailAdapter(
                host=settings.smtp_host,
                port=settings.smtp_port,
                sender=settings.email_from,
                username=settings.smtp_username,
                password=settings.smtp_password,
            )
        else:
            raise ValueError(f"Unknown email adapter: {settings.email_adapter}")

    return _mailer


def reset_mailer():
    """Drop the cached adapter (useful for testing)."""
    global _mailer
    _mailer = None
