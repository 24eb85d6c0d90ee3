"""SMTP transport settings read from the environment."""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class SMTPConfig:
    host: str = 'smtp.gmail.com'
    port: int = 587
    username: str | None = None
    password: str | None = None
    from_email: str | None = None
    start_tls: bool = True
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> 'SMTPConfig':
        username = os.getenv('SMTP_USERNAME')
        port = int(os.getenv('SMTP_PORT', '587'))
        if not 1 <= port <= 65535:
            raise ValueError('SMTP_PORT must be between 1 and 65535')
        return cls(
            host=os.getenv('SMTP_HOST', 'smtp.gmail.com'),
            port=port,
            username=username,
            password=os.getenv('SMTP_PASSWORD'),
            from_email=os.getenv('SMTP_FROM') or username,
            start_tls=_env_bool('SMTP_START_TLS', True),
            timeout=float(os.getenv('SMTP_TIMEOUT', '30')),
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)
