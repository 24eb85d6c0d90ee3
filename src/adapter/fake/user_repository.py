"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import fields as dataclass_fields, replace
from datetime import datetime, timezone
from domain.model.errors import DuplicateEmailError
from domain.model.user import User


UPDATABLE_FIELDS = frozenset(f.name for f in dataclass_fields(User)) - {'id', 'email', 'created_at'}


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        # Stands in for the unique index and single-document atomicity
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, first_name: str = '', last_name: str = '') -> User:
        with self._lock:
            if any(u.email == email for u in self.store.values()):
                raise DuplicateEmailError("Email already registered")

            now = datetime.now(timezone.utc)
            user = User(
                id=uuid.uuid4().hex,
                email=email,
                created_at=now,
                updated_at=now,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
            )
            self.store[user.id] = user
            return replace(user)

    def update(self, user_id: str, fields: dict) -> User | None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return None
            for key, value in fields.items():
                setattr(user, key, value)
            user.updated_at = datetime.now(timezone.utc)
            return replace(user)

    def consume_reset_token(self, token: str, now: datetime, password_hash: str) -> User | None:
        with self._lock:
            for user in self.store.values():
                if user.has_valid_reset_token(token, now):
                    user.password_hash = password_hash
                    user.reset_token = None
                    user.reset_token_expiry = None
                    user.updated_at = now
                    return replace(user)
            return None

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in list(self.store.values()):
            if user.email == email:
                return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

    def get_by_reset_token(self, token: str, now: datetime) -> User | None:
        for user in list(self.store.values()):
            if user.has_valid_reset_token(token, now):
                return replace(user)
        return None
