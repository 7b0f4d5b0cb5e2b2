"""
Store failure classifications.

Read failures are recoverable: the caller treats an unreadable credential
as absent. Write failures abort the action that issued them.
"""

from typing import Optional

from .token_errors import TokenReconcilerError


class StoreError(TokenReconcilerError):
    """Base class for secret store and settings failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.key = key


class StoreReadError(StoreError):
    """A read from the secret store or settings failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.recoverable = True


class StoreWriteError(StoreError):
    """A write or delete against the secret store or settings failed."""

    def __init__(self, message: str, scope: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.scope = scope
