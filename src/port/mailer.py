"""Port definition for outbound email."""

from typing import Protocol


class MailerPort(Protocol):
    async def send(self, to: str, subject: str, template_name: str, payload: dict) -> None:
        """Render template_name with payload and deliver it to a single recipient.

        Raises MailDeliveryError on any rendering or transport failure.
        """
        ...
