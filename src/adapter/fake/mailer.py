"""In-memory implementation of MailerPort for testing."""

from dataclasses import dataclass

from domain.model.errors import MailDeliveryError


@dataclass
class SentMail:
    to: str
    subject: str
    template_name: str
    payload: dict


class FakeMailer:
    def __init__(self, fail: bool = False):
        self.sent: list[SentMail] = []
        self.fail = fail

    async def send(self, to: str, subject: str, template_name: str, payload: dict) -> None:
        if self.fail:
            raise MailDeliveryError("Simulated transport failure")
        self.sent.append(SentMail(to=to, subject=subject, template_name=template_name, payload=payload))
