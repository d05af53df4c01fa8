import smtplib


class RecordingMailer:
    """Keeps every message instead of sending it."""

    def __init__(self):
        self.sent: list[dict] = []

    def send(self, recipient: str, subject: str, body: str) -> None:
        self.sent.append({"recipient": recipient, "subject": subject, "body": body})

    @property
    def last_reset_token(self) -> str:
        return self.sent[-1]["body"].rstrip().rsplit("/", 1)[-1]


class FailingMailer:
    def send(self, recipient: str, subject: str, body: str) -> None:
        raise smtplib.SMTPServerDisconnected("Connection unexpectedly closed")
