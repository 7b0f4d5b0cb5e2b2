"""
Token state machine module.

Classifies effective credential presence into NONE, LEGACY_ONLY,
SECURE_ONLY or BOTH and bridges store propagation delays with grace windows.
"""
from .hints import TokenHints, derive_hints
from .machine import TokenStateMachine, classify
from .models import DerivedTokenState, LegacyOverride, LegacyOverrideKind, TokenState
from .windows import WindowClock, WindowSnapshot

__all__ = [
    "DerivedTokenState",
    "LegacyOverride",
    "LegacyOverrideKind",
    "TokenHints",
    "TokenState",
    "TokenStateMachine",
    "WindowClock",
    "WindowSnapshot",
    "classify",
    "derive_hints",
]
