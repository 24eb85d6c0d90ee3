import os
from functools import lru_cache

from fastapi import HTTPException

from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.smtp.config import SMTPConfig
from adapter.smtp.mailer import SMTPMailer
from port.mailer import MailerPort
from port.user_repository import UserRepository

CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:3000")


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


@lru_cache(maxsize=1)
def get_mailer() -> MailerPort:
    return SMTPMailer(SMTPConfig.from_env())


def get_client_url() -> str:
    """Public base URL of the frontend, used to build reset links."""
    return CLIENT_URL
