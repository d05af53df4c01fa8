import logging
import smtplib
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Protocol

from fastapi import Depends

from bootcamp_directory.utils.config import Settings, get_settings


logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, recipient: str, subject: str, body: str) -> None:
        ...


class SmtpMailer:
    """Plain-text mail over SMTP. Transport errors propagate to the caller."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def send(self, recipient: str, subject: str, body: str) -> None:
        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.settings.from_name, self.settings.from_email))
        msg["To"] = recipient

        server = smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=10)
        try:
            if self.settings.smtp_tls:
                server.starttls()
            if self.settings.smtp_user and self.settings.smtp_password:
                server.login(self.settings.smtp_user, self.settings.smtp_password)
            server.sendmail(self.settings.from_email, [recipient], msg.as_string())
        finally:
            server.quit()
        logger.info("Sent '%s' to %s", subject, recipient)


def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    return SmtpMailer(settings)
