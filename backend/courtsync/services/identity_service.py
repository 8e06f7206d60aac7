"""
Built-in identity provider backed by the document store.

Administrator accounts live in `admin_accounts`, keyed by lowercased email.
Error codes follow the hosted provider's naming so the console can map
them to the same messages.
"""

import uuid
from datetime import datetime, timezone

from fastapi import Depends

from courtsync.schemas.auth import AdminIdentity
from courtsync.services.interfaces.document_store import DocumentNotFound, DocumentStore, StoreError
from courtsync.services.interfaces.identity import IdentityError, IdentityProvider
from courtsync.services.store_factory import get_document_store
from courtsync.core.config import get_settings
from courtsync.core.security import hash_password, verify_password
from courtsync.core.logging import get_logger

logger = get_logger(__name__)

ADMIN_ACCOUNTS = "admin_accounts"

EMAIL_IN_USE = "auth/email-already-in-use"
WEAK_PASSWORD = "auth/weak-password"
INVALID_CREDENTIAL = "auth/invalid-credential"
INTERNAL_ERROR = "auth/internal-error"


class StoreIdentityProvider(IdentityProvider):
    def __init__(self, store: DocumentStore, min_password_length: int = 6):
        self.store = store
        self.min_password_length = min_password_length

    async def sign_in_with_password(self, email: str, password: str) -> AdminIdentity:
        key = email.strip().lower()
        try:
            account = await self.store.get_one(ADMIN_ACCOUNTS, key)
        except DocumentNotFound:
            raise IdentityError(INVALID_CREDENTIAL) from None
        except StoreError as e:
            raise IdentityError(INTERNAL_ERROR, str(e)) from e

        if not verify_password(password, account.get("passwordHash", "")):
            raise IdentityError(INVALID_CREDENTIAL)
        return AdminIdentity(uid=account["uid"], email=account["email"])

    async def create_account_with_password(self, email: str, password: str) -> AdminIdentity:
        key = email.strip().lower()
        if len(password) < self.min_password_length:
            raise IdentityError(WEAK_PASSWORD)

        try:
            await self.store.get_one(ADMIN_ACCOUNTS, key)
        except DocumentNotFound:
            pass
        except StoreError as e:
            raise IdentityError(INTERNAL_ERROR, str(e)) from e
        else:
            raise IdentityError(EMAIL_IN_USE)

        identity = AdminIdentity(uid=uuid.uuid4().hex[:28], email=key)
        try:
            await self.store.add(ADMIN_ACCOUNTS, {
                "uid": identity.uid,
                "email": identity.email,
                "passwordHash": hash_password(password),
                "createdAt": datetime.now(timezone.utc).isoformat(),
            }, document_id=key)
        except StoreError as e:
            raise IdentityError(INTERNAL_ERROR, str(e)) from e

        logger.info("admin_account_created", uid=identity.uid, email=identity.email)
        return identity

    async def sign_out(self, identity: AdminIdentity) -> None:
        # Sessions are tracked by the console; the account store keeps none
        logger.debug("identity_sign_out", uid=identity.uid)


def get_identity_provider(store: DocumentStore = Depends(get_document_store)) -> IdentityProvider:
    """FastAPI dependency: identity provider over the shared document store."""
    return StoreIdentityProvider(store, get_settings().MIN_PASSWORD_LENGTH)
