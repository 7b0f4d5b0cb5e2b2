"""
Error classification for the token reconciler.

The state machine itself never raises; these exceptions cover the store
collaborator, token input and configuration.
"""

from .store_errors import (
    StoreError,
    StoreReadError,
    StoreWriteError,
)
from .token_errors import (
    ConfigurationError,
    InvalidTokenError,
    TokenReconcilerError,
)

__all__ = [
    "TokenReconcilerError",
    # Store failures
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    # Input / configuration
    "InvalidTokenError",
    "ConfigurationError",
]
