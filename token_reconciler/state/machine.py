"""
Core token reconciliation state machine.

The secret store and the plaintext setting are written independently and
both propagate asynchronously. Recorders are called synchronously when a
credential mutation is issued and open grace windows; derive_token_state
then classifies a fresh sample of both stores against those windows so
that a query landing mid-write reflects the user's intent rather than
not-yet-visible storage.
"""

from typing import Callable, Optional

from ..config.defaults import WindowParams
from ..logging.config import get_state_logger, log_state_transition, log_window_change
from ..utils.time import NowFn, resolve_now
from .models import DerivedTokenState, TokenState, TokenStateEvent
from .windows import WindowClock, WindowSnapshot

state_logger = get_state_logger(__name__)

Observer = Callable[[TokenStateEvent], None]


def classify(secret_present: bool, legacy_present_raw: bool,
             windows: WindowSnapshot) -> DerivedTokenState:
    """
    Pure classification of one store sample against the grace windows.

    Suppression of the plaintext setting always wins over retention.

    Args:
        secret_present: Raw result of sampling the secret store
        legacy_present_raw: Raw trimmed-non-empty test on the plaintext setting
        windows: Window state at the query time

    Returns:
        DerivedTokenState for the sample
    """
    has_legacy = (legacy_present_raw or windows.legacy_retained) and not windows.legacy_suppressed
    has_secure = secret_present or windows.secure_assumed
    return DerivedTokenState.from_presence(has_secure, has_legacy)


def _active_windows(windows: WindowSnapshot) -> tuple:
    return (windows.secure_assumed, windows.legacy_retained, windows.legacy_suppressed)


class TokenStateMachine:
    """Owns the grace windows of one session and classifies store samples."""

    def __init__(
        self,
        params: Optional[WindowParams] = None,
        clock: Optional[WindowClock] = None,
        now_fn: Optional[NowFn] = None,
        observer: Optional[Observer] = None,
        session_id: str = "default"
    ):
        self.params = params or WindowParams()
        self.clock = clock or WindowClock()
        self.now_fn = now_fn
        self.observer = observer
        self.session_id = session_id
        self.logger = state_logger.bind(session_id=session_id)
        self._last_state: Optional[TokenState] = None
        self._last_trigger = "initial"
        self._trigger_windows = (False, False, False)

    def derive_token_state(self, secret_present: bool, legacy_present_raw: bool,
                           now: Optional[int] = None) -> DerivedTokenState:
        """
        Classify the current store sample.

        Total over all inputs and never raises. A change from the previously
        derived state is recorded as an audited transition, attributed to the
        last recorder, to `window_expired` when a grace window lapsed since,
        or to `store_sample` otherwise.
        """
        now = resolve_now(now, self.now_fn)
        windows = self.clock.snapshot(now)
        derived = classify(bool(secret_present), bool(legacy_present_raw), windows)

        if derived.state != self._last_state:
            if _active_windows(windows) != self._trigger_windows:
                self._last_trigger = "window_expired"
            self._audit_transition(derived, windows, secret_present, legacy_present_raw)
            self._set_trigger("store_sample", windows)
        else:
            self._trigger_windows = _active_windows(windows)

        return derived

    def record_secure_set(self) -> None:
        """
        A secure-store write was issued together with clearing the plaintext.

        Opens secure-assume and replaces any legacy override with suppression.
        """
        now = resolve_now(None, self.now_fn)
        self.clock.assume_secure(now + self.params.secure_assume_ms)
        self.clock.suppress_legacy(now + self.params.legacy_suppress_ms)
        self._windows_changed("record_secure_set", now)

    def record_migration_keep(self) -> None:
        """
        Migration into secure storage that keeps the plaintext copy.

        Opens secure-assume and a retain window. A suppress window that is
        still active stays in place and wins until it lapses; the retain
        window then applies for the rest of its duration.
        """
        now = resolve_now(None, self.now_fn)
        self.clock.assume_secure(now + self.params.secure_assume_ms)

        retain_until = now + self.params.legacy_retain_ms
        override = self.clock.legacy_override

        if override.is_suppressing(now):
            self.logger.warning(
                "Legacy retain deferred behind active suppress window",
                suppress_remaining=self.clock.snapshot(now).suppress_remaining,
            )
            self.clock.suppress_legacy(override.until, then_retain_until=retain_until)
        else:
            self.clock.retain_legacy(retain_until)

        self._windows_changed("record_migration_keep", now)

    def record_secure_cleared(self) -> None:
        """The secure credential was removed; drop any residual assumption."""
        now = resolve_now(None, self.now_fn)
        self.clock.close_secure_assume()
        self._windows_changed("record_secure_cleared", now)

    def record_plaintext_cleared(self) -> None:
        """The plaintext copy was removed while the secure copy stays."""
        now = resolve_now(None, self.now_fn)
        self.clock.suppress_legacy(now + self.params.legacy_suppress_ms)
        self._windows_changed("record_plaintext_cleared", now)

    def reset_all_windows(self) -> None:
        """Zero every window. Idempotent."""
        self.clock.reset()
        self._set_trigger("reset_all_windows", self.windows())
        self.logger.debug("Grace windows reset")

    def windows(self, now: Optional[int] = None) -> WindowSnapshot:
        return self.clock.snapshot(resolve_now(now, self.now_fn))

    def debug_snapshot(self, now: Optional[int] = None) -> str:
        """Remaining milliseconds on each window, for diagnostics."""
        return self.windows(now).describe()

    def _set_trigger(self, trigger: str, windows: WindowSnapshot) -> None:
        self._last_trigger = trigger
        self._trigger_windows = _active_windows(windows)

    def _windows_changed(self, action: str, now: int) -> None:
        override = self.clock.legacy_override
        self._set_trigger(action, self.clock.snapshot(now))
        log_window_change(
            self.logger,
            session_id=self.session_id,
            action=action,
            secure_assume_until=self.clock.secure_assume_until,
            legacy_override=override.kind.value,
            legacy_until=override.until,
        )
        self._notify(TokenStateEvent(
            session_id=self.session_id,
            kind=action,
            timestamp=now,
            context={
                "secure_assume_until": self.clock.secure_assume_until,
                "legacy_override": override.kind.value,
                "legacy_until": override.until,
            },
        ))

    def _audit_transition(self, derived: DerivedTokenState, windows: WindowSnapshot,
                          secret_present: bool, legacy_present_raw: bool) -> None:
        previous = self._last_state
        self._last_state = derived.state
        context = {
            "secret_present": bool(secret_present),
            "legacy_present_raw": bool(legacy_present_raw),
            "secure_assumed": windows.secure_assumed,
            "legacy_override": windows.legacy_override.active_kind(windows.now).value,
        }
        log_state_transition(
            self.logger,
            session_id=self.session_id,
            from_state=previous.value if previous else "unknown",
            to_state=derived.state.value,
            trigger=self._last_trigger,
            context=context,
        )
        self._notify(TokenStateEvent(
            session_id=self.session_id,
            kind="transition",
            timestamp=windows.now,
            from_state=previous,
            to_state=derived.state,
            trigger=self._last_trigger,
            context=context,
        ))

    def _notify(self, event: TokenStateEvent) -> None:
        if self.observer is None:
            return
        try:
            self.observer(event)
        except Exception:
            # Observer failures must not leak into classification
            self.logger.exception("Token state observer failed", event_kind=event.kind)
