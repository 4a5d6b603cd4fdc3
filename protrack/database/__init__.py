"""
Sheet-backed entity store.

Import EntityStore from .store; this package root only carries the
exception types so the integrations layer can raise them without a cycle.
"""

from .exceptions import (
    StoreError,
    StoreConfigurationError,
    EntityNotFoundError,
    ReferentialConflictError,
    StoreOperationError,
)

__all__ = [
    "StoreError",
    "StoreConfigurationError",
    "EntityNotFoundError",
    "ReferentialConflictError",
    "StoreOperationError",
]
