"""
Grace windows bridging asynchronous store propagation.

A WindowClock belongs to exactly one state machine. It holds the expiry of
the secure-assume window and the current legacy override; windows lapse
purely by time and need no explicit close step.
"""

from dataclasses import dataclass

from ..utils.time import is_active, remaining_ms
from .models import LegacyOverride, LegacyOverrideKind


@dataclass(frozen=True)
class WindowSnapshot:
    """Point-in-time copy of the window state."""

    secure_assume_until: int
    legacy_override: LegacyOverride
    now: int

    @property
    def secure_assumed(self) -> bool:
        return is_active(self.secure_assume_until, self.now)

    @property
    def legacy_retained(self) -> bool:
        return self.legacy_override.is_retaining(self.now)

    @property
    def legacy_suppressed(self) -> bool:
        return self.legacy_override.is_suppressing(self.now)

    @property
    def secure_assume_remaining(self) -> int:
        return remaining_ms(self.secure_assume_until, self.now)

    @property
    def retain_remaining(self) -> int:
        return remaining_ms(self.legacy_override.retain_until(), self.now)

    @property
    def suppress_remaining(self) -> int:
        return remaining_ms(self.legacy_override.suppress_until(), self.now)

    def describe(self) -> str:
        return (
            f"windows suppressRemaining={self.suppress_remaining} "
            f"retainRemaining={self.retain_remaining} "
            f"secureAssumeRemaining={self.secure_assume_remaining}"
        )


class WindowClock:
    """Mutable holder of the grace-window expiries for one session."""

    def __init__(self):
        self.secure_assume_until = 0
        self.legacy_override = LegacyOverride.none()

    def assume_secure(self, until: int) -> None:
        self.secure_assume_until = until

    def close_secure_assume(self) -> None:
        self.secure_assume_until = 0

    def retain_legacy(self, until: int) -> None:
        self.legacy_override = LegacyOverride.retain(until)

    def suppress_legacy(self, until: int, then_retain_until: int = 0) -> None:
        self.legacy_override = LegacyOverride.suppress(until, then_retain_until)

    def reset(self) -> None:
        """Zero every window."""
        self.secure_assume_until = 0
        self.legacy_override = LegacyOverride.none()

    def is_zeroed(self) -> bool:
        return (
            self.secure_assume_until == 0
            and self.legacy_override.kind == LegacyOverrideKind.NONE
            and self.legacy_override.until == 0
            and self.legacy_override.then_retain_until == 0
        )

    def snapshot(self, now: int) -> WindowSnapshot:
        return WindowSnapshot(
            secure_assume_until=self.secure_assume_until,
            legacy_override=self.legacy_override,
            now=now,
        )
