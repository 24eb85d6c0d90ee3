"""Auth service — registration, login and password reset business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
from datetime import datetime, timezone
from functools import lru_cache

import bcrypt

from domain.model.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    UserNotFoundError,
    ValidationError,
)
from domain.model.user import User
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services.token_service import RESET_TOKEN_TTL, create_reset_token

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72

RESET_EMAIL_SUBJECT = "Reset your password"
RESET_EMAIL_TEMPLATE = "reset_password.html"


def normalize_email(email: str) -> str:
    """Emails are compared case-insensitively, so they are stored lowercased."""
    return email.strip().lower()


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    encoded = plain.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed.encode("utf-8"))


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Checked against when the email is unknown, so both login failures cost a bcrypt round
    return _hash_password("not-a-real-password")


def _validate_password(password: str) -> None:
    if not password:
        raise ValidationError("Password is required")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")


def register(
    repo: UserRepository,
    email: str,
    password: str,
    first_name: str = '',
    last_name: str = '',
) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        DuplicateEmailError: email already registered (also when a concurrent
            registration wins the race at insert time)
        ValidationError: password is empty or too long to hash
    """
    email = normalize_email(email)
    if repo.get_by_email(email):
        raise DuplicateEmailError("Email already registered")

    _validate_password(password)
    password_hash = _hash_password(password)

    user = repo.create(
        email=email,
        password_hash=password_hash,
        first_name=first_name or '',
        last_name=last_name or '',
    )
    logger.info("User registered", extra={"userId": user.id, "email": email})
    return user


def authenticate(repo: UserRepository, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Unknown email and wrong password raise the same error after the same
    amount of hashing work.

    Raises:
        InvalidCredentialsError: invalid credentials (deliberately vague)
    """
    user = repo.get_by_email(normalize_email(email))
    stored_hash = user.password_hash if user and user.password_hash else _dummy_hash()

    if not _verify_password(password, stored_hash) or user is None:
        raise InvalidCredentialsError("Invalid email or password")

    logger.info("User logged in", extra={"userId": user.id})
    return user


async def request_password_reset(
    repo: UserRepository,
    mailer: MailerPort,
    email: str,
    client_url: str,
    now: datetime | None = None,
) -> User:
    """Issue a reset token, store it with its expiry, and email the reset link.

    Raises:
        UserNotFoundError: no account for this email; no mail is sent
        MailDeliveryError: the email could not be sent
    """
    now = now or datetime.now(timezone.utc)
    user = repo.get_by_email(normalize_email(email))
    if not user:
        raise UserNotFoundError("User not found")

    # JWT exp has whole-second resolution; store exactly what the token carries
    expires_at = (now + RESET_TOKEN_TTL).replace(microsecond=0)
    token = create_reset_token(user.id, expires_at)
    user = repo.update(user.id, {'reset_token': token, 'reset_token_expiry': expires_at})
    if not user:
        raise UserNotFoundError("User not found")

    reset_link = f"{client_url.rstrip('/')}/reset-password/{token}"
    await mailer.send(
        user.email,
        RESET_EMAIL_SUBJECT,
        RESET_EMAIL_TEMPLATE,
        {'name': user.display_name, 'resetLink': reset_link},
    )

    logger.info("Password reset requested", extra={"userId": user.id})
    return user


def validate_reset_token(repo: UserRepository, token: str, now: datetime | None = None) -> bool:
    """Check a reset token without consuming it."""
    now = now or datetime.now(timezone.utc)
    return repo.get_by_reset_token(token, now) is not None


def reset_password(
    repo: UserRepository,
    token: str,
    new_password: str,
    now: datetime | None = None,
) -> User:
    """Set a new password with a reset token, consuming the token.

    Raises:
        InvalidOrExpiredTokenError: token unknown, expired, or already used
        ValidationError: new password is empty or too long to hash
    """
    now = now or datetime.now(timezone.utc)
    if not validate_reset_token(repo, token, now):
        raise InvalidOrExpiredTokenError("Invalid or expired token")

    _validate_password(new_password)
    password_hash = _hash_password(new_password)

    user = repo.consume_reset_token(token, now, password_hash)
    if not user:
        raise InvalidOrExpiredTokenError("Invalid or expired token")

    logger.info("Password reset", extra={"userId": user.id})
    return user
