"""SMTP implementation of MailerPort.

Renders file-based Jinja2 templates and hands the result to aiosmtplib.
Each send opens its own connection; there is no retry at this layer.
"""

import logging
import os
from email.message import EmailMessage
from pathlib import Path

import aiosmtplib
from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from adapter.smtp.config import SMTPConfig
from domain.model.errors import MailDeliveryError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(
    os.getenv('MAIL_TEMPLATES_DIR', Path(__file__).parent / 'templates')
)


class SMTPMailer:
    def __init__(self, config: SMTPConfig, templates_dir: Path | str = DEFAULT_TEMPLATES_DIR):
        self.config = config
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(['html', 'xml']),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, payload: dict) -> str:
        """Render a template to HTML. Raises MailDeliveryError if it is missing or broken."""
        try:
            return self.jinja_env.get_template(template_name).render(**payload)
        except TemplateError as e:
            logger.error("Template rendering failed", extra={"template": template_name, "error": str(e)})
            raise MailDeliveryError(f"Cannot render template {template_name}") from e

    def build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message['From'] = self.config.from_email or ''
        message['To'] = to
        message['Subject'] = subject
        message.set_content("This message requires an HTML-capable email client.")
        message.add_alternative(html, subtype='html')
        return message

    async def send(self, to: str, subject: str, template_name: str, payload: dict) -> None:
        html = self.render(template_name, payload)
        message = self.build_message(to, subject, html)

        try:
            await aiosmtplib.send(
                message,
                hostname=self.config.host,
                port=self.config.port,
                username=self.config.username,
                password=self.config.password,
                start_tls=self.config.start_tls,
                timeout=self.config.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Email delivery failed", extra={
                "to": to,
                "template": template_name,
                "error": str(e)[:200],
            })
            raise MailDeliveryError("Email delivery failed") from e

        logger.info("Email sent", extra={"to": to, "template": template_name})
