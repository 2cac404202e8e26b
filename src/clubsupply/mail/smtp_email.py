"""SMTP email adapter."""

import smtplib
from email.message import EmailMessage
from uuid import uuid4

from clubsupply.mail.email_port import EmailPort
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)


class SMTPEmailAdapter(EmailPort):
    """Sends mail through an SMTP relay using STARTTLS."""

    def __init__(self, host: str, port: int, sender: str, username: str | None = None, password: str | None = None):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password

    def send(self, to: str, subject: str, body: str) -> dict:
        message_id = f"email-{uuid4().hex[:12]}"

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = f"<{message_id}@{self.host}>"
        message.set_content(body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=10) as client:
                client.starttls()
                if self.username:
                    client.login(self.username, self.password or "")
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("email_delivery_failed", to=to, error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        return {"message_id": message_id, "status": "sent"}
