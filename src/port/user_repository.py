from datetime import datetime
from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(self, email: str, password_hash: str, first_name: str = '', last_name: str = '') -> User:
        """Create a new user. Raise DuplicateEmailError if the email is taken."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_reset_token(self, token: str, now: datetime) -> User | None:
        """Find the user holding this reset token, only if it expires after now."""
        ...

    def update(self, user_id: str, fields: dict) -> User | None:
        """Merge fields into the user. None values remove the field. Return updated User."""
        ...

    def consume_reset_token(self, token: str, now: datetime, password_hash: str) -> User | None:
        """Atomically set the new hash and clear the reset pair if the token is still valid."""
        ...
