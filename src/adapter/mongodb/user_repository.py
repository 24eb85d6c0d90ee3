"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateEmailError, StoreError
from domain.model.user import User

logger = getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    'password_hash',
    'first_name',
    'last_name',
    'reset_token',
    'reset_token_expiry',
})


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('reset_token', 1)], 'idx_users_reset_token', sparse=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            password_hash=doc.get('password_hash'),
            first_name=doc.get('first_name', ''),
            last_name=doc.get('last_name', ''),
            reset_token=doc.get('reset_token'),
            reset_token_expiry=doc.get('reset_token_expiry'),
        )

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, first_name: str = '', last_name: str = '') -> User:
        """Insert a new user. The unique email index decides duplicates."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'password_hash': password_hash,
            'first_name': first_name,
            'last_name': last_name,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateEmailError("Email already registered")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StoreError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(user_doc)

    def update(self, user_id: str, fields: dict) -> User | None:
        """Merge fields into the user document. None values are unset."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        to_set = {k: v for k, v in fields.items() if v is not None}
        to_unset = {k: '' for k, v in fields.items() if v is None}
        to_set['updated_at'] = datetime.now(timezone.utc)

        change = {'$set': to_set}
        if to_unset:
            change['$unset'] = to_unset

        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                change,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise StoreError("Failed to update user") from e

        if doc is None:
            return None
        logger.debug("User updated", extra={"userId": user_id, "fields": sorted(fields)})
        return self._to_domain(doc)

    def consume_reset_token(self, token: str, now: datetime, password_hash: str) -> User | None:
        """Swap in the new hash and drop the reset pair in a single matched write.

        Concurrent callers holding the same token race on the filter; only one
        of them gets a document back.
        """
        if not token:
            return None
        try:
            doc = self.collection.find_one_and_update(
                {'reset_token': token, 'reset_token_expiry': {'$gt': now}},
                {
                    '$set': {'password_hash': password_hash, 'updated_at': now},
                    '$unset': {'reset_token': '', 'reset_token_expiry': ''},
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to consume reset token", extra={"error": str(e)})
            raise StoreError("Failed to reset password") from e

        return self._to_domain(doc) if doc else None

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        return self._find_one({'email': email}, "email", email)

    def get_by_id(self, user_id: str) -> User | None:
        return self._find_one({'_id': user_id}, "userId", user_id)

    def get_by_reset_token(self, token: str, now: datetime) -> User | None:
        if not token:
            return None
        return self._find_one(
            {'reset_token': token, 'reset_token_expiry': {'$gt': now}},
            "lookup", "reset_token",
        )

    def _find_one(self, query: dict, log_key: str, log_value: str) -> User | None:
        try:
            doc = self.collection.find_one(query)
        except PyMongoError as e:
            logger.error("Failed to get user", extra={log_key: log_value, "error": str(e)})
            raise StoreError("Failed to read user") from e
        return self._to_domain(doc) if doc else None
