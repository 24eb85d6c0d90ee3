from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a registered account."""
    id: str
    email: str
    created_at: datetime
    updated_at: datetime
    password_hash: str | None = None
    first_name: str = ''
    last_name: str = ''
    reset_token: str | None = None
    reset_token_expiry: datetime | None = None

    def public_view(self) -> dict:
        """Fields safe to hand to clients (no hash, no reset pair)."""
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
        }

    def has_valid_reset_token(self, token: str, now: datetime) -> bool:
        if not token or self.reset_token != token or self.reset_token_expiry is None:
            return False
        return self.reset_token_expiry > now

    @property
    def display_name(self) -> str:
        """First name, falling back to the local part of the email."""
        return self.first_name or self.email.split('@')[0]
