"""
Token state data models.

This module defines immutable data structures for the derived credential
state, the legacy-setting override, and the transition events reported to
observers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TokenState(str, Enum):
    """Effective credential states. Mutually exclusive and exhaustive."""
    NONE = "NONE"
    LEGACY_ONLY = "LEGACY_ONLY"
    SECURE_ONLY = "SECURE_ONLY"
    BOTH = "BOTH"

    @classmethod
    def from_presence(cls, has_secure: bool, has_legacy: bool) -> "TokenState":
        """Map effective presence booleans onto a state."""
        if has_secure and has_legacy:
            return cls.BOTH
        if has_secure:
            return cls.SECURE_ONLY
        if has_legacy:
            return cls.LEGACY_ONLY
        return cls.NONE


class LegacyOverrideKind(str, Enum):
    """Kinds of time-boxed override applied to the plaintext setting read."""
    NONE = "none"
    RETAIN = "retain"          # Treat plaintext as present
    SUPPRESS = "suppress"      # Treat plaintext as absent


@dataclass(frozen=True)
class LegacyOverride:
    """
    Tagged union over the plaintext-setting grace windows.

    Retention and suppression express opposite intents, so only one kind is
    in place at a time. A suppress override may carry a retain expiry
    (`then_retain_until`) that takes effect once suppression lapses;
    suppression always wins while it is active.
    """

    kind: LegacyOverrideKind = LegacyOverrideKind.NONE
    until: int = 0
    then_retain_until: int = 0

    @classmethod
    def none(cls) -> "LegacyOverride":
        return cls()

    @classmethod
    def retain(cls, until: int) -> "LegacyOverride":
        return cls(kind=LegacyOverrideKind.RETAIN, until=until)

    @classmethod
    def suppress(cls, until: int, then_retain_until: int = 0) -> "LegacyOverride":
        return cls(kind=LegacyOverrideKind.SUPPRESS, until=until,
                   then_retain_until=then_retain_until)

    def is_retaining(self, now: int) -> bool:
        return now < self.retain_until()

    def is_suppressing(self, now: int) -> bool:
        return self.kind == LegacyOverrideKind.SUPPRESS and now < self.until

    def retain_until(self) -> int:
        """Retain expiry, or 0 when no retain window is in place."""
        if self.kind == LegacyOverrideKind.RETAIN:
            return self.until
        if self.kind == LegacyOverrideKind.SUPPRESS:
            return self.then_retain_until
        return 0

    def suppress_until(self) -> int:
        """Suppress expiry, or 0 when no suppress window is in place."""
        return self.until if self.kind == LegacyOverrideKind.SUPPRESS else 0

    def active_kind(self, now: int) -> LegacyOverrideKind:
        """Override currently in effect; suppression wins over retention."""
        if self.is_suppressing(now):
            return LegacyOverrideKind.SUPPRESS
        if self.is_retaining(now):
            return LegacyOverrideKind.RETAIN
        return LegacyOverrideKind.NONE


@dataclass(frozen=True)
class DerivedTokenState:
    """Effective credential state, recomputed on every query and never stored."""

    state: TokenState
    has_secure: bool
    has_legacy: bool

    @classmethod
    def from_presence(cls, has_secure: bool, has_legacy: bool) -> "DerivedTokenState":
        """Build the derived state from effective presence."""
        return cls(
            state=TokenState.from_presence(has_secure, has_legacy),
            has_secure=has_secure,
            has_legacy=has_legacy,
        )

    @property
    def residual_plaintext(self) -> bool:
        """Secure token exists but the plaintext copy was not removed."""
        return self.state == TokenState.BOTH

    @property
    def secure_pat_only(self) -> bool:
        """Fully migrated: only the secure copy exists."""
        return self.state == TokenState.SECURE_ONLY

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "has_secure": self.has_secure,
            "has_legacy": self.has_legacy,
            "residual_plaintext": self.residual_plaintext,
            "secure_pat_only": self.secure_pat_only,
        }


@dataclass(frozen=True)
class TokenStateEvent:
    """Audit event reported to the machine's observer."""

    session_id: str
    kind: str                                # "transition" or a recorder name
    timestamp: int
    from_state: Optional[TokenState] = None
    to_state: Optional[TokenState] = None
    trigger: str = ""                        # What caused a transition
    context: dict = field(default_factory=dict)
