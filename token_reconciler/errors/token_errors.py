"""
Base and input error classifications.
"""

from typing import Any, Dict, List, Optional


class TokenReconcilerError(Exception):
    """Base class for all token reconciler errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class InvalidTokenError(TokenReconcilerError):
    """A blank or otherwise unusable token was submitted."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.source = source
        self.recoverable = True


class ConfigurationError(TokenReconcilerError):
    """Configuration failed validation."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
