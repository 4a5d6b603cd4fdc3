"""Custom exceptions for entity store operations."""


class StoreError(Exception):
    """Base exception for entity store errors."""
    pass


class StoreConfigurationError(StoreError):
    """Credentials or spreadsheet id missing or unusable."""
    pass


class EntityNotFoundError(StoreError):
    """Requested entity not found."""
    pass


class ReferentialConflictError(StoreError):
    """Entity is still referenced by a project and cannot be deleted."""
    pass


class StoreOperationError(StoreError):
    """General sheet operation failed."""
    pass
