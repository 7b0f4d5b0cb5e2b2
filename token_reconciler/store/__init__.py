"""
Credential store collaborators.

The host platform owns the real secret store and settings; the core only
talks to them through the TokenStore interface.
"""
from .base import ConfigurationScope, TokenStore
from .memory import InMemoryTokenStore

__all__ = ["ConfigurationScope", "InMemoryTokenStore", "TokenStore"]
