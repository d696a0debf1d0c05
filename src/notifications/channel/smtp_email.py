"""SMTP email adapter — delivers through a mail relay."""

import smtplib
from email.message import EmailMessage
from uuid import uuid4

from notifications.channel.email_port import EmailPort
from shared.config import get_settings


class SmtpEmailAdapter(EmailPort):
    """Relay settings default to the ``SMTP_*`` and ``EMAIL_FROM`` settings."""

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        sender: str | None = None,
        timeout: float = 10.0,
    ):
        settings = get_settings()
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = username or settings.smtp_user
        self.password = password or settings.smtp_password
        self.sender = sender or settings.email_from or self.username or "no-reply@storefront.local"
        self.timeout = timeout

    def send(self, to: str, subject: str, body: str) -> dict:
        message = EmailMessage()
        message_id = f"<{uuid4().hex}@storefront>"
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = message_id
        message.set_content(body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            return {"message_id": None, "status": "failed", "error": str(exc)}

        return {"message_id": message_id, "status": "sent"}
