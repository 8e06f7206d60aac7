"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .document_store import (
    DocumentNotFound,
    DocumentStore,
    Snapshot,
    StoreError,
    SubscriptionError,
    WriteOp,
)
from .identity import IdentityError, IdentityProvider

__all__ = [
    'DocumentStore', 'Snapshot', 'WriteOp',
    'StoreError', 'DocumentNotFound', 'SubscriptionError',
    'IdentityProvider', 'IdentityError',
]
