"""
Identity provider interface.
Allows swapping the built-in account store for a hosted provider.
"""

from abc import ABC, abstractmethod

from courtsync.schemas.auth import AdminIdentity


class IdentityError(Exception):
    """
    Failed identity operation.

    code follows the hosted provider's vocabulary, e.g.
    'auth/email-already-in-use', 'auth/weak-password',
    'auth/invalid-credential'.
    """

    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code


class IdentityProvider(ABC):
    """
    Interface for administrator authentication.

    Implementations:
    - StoreIdentityProvider: accounts kept in the document store
    """

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> AdminIdentity:
        """Verify credentials. Raises IdentityError on failure."""

    @abstractmethod
    async def create_account_with_password(self, email: str, password: str) -> AdminIdentity:
        """Register a new administrator. Raises IdentityError on failure."""

    @abstractmethod
    async def sign_out(self, identity: AdminIdentity) -> None:
        """Terminate the provider-side session for this identity."""
