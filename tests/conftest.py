"""Pytest configuration and shared fixtures."""

import pytest

from token_reconciler.config.defaults import WindowParams
from token_reconciler.service import TokenService
from token_reconciler.state.machine import TokenStateMachine
from token_reconciler.store.memory import InMemoryTokenStore
from token_reconciler.utils.time import FakeClock

START_MS = 1_700_000_000_000


@pytest.fixture
def clock() -> FakeClock:
    """Manually advanced clock starting at START_MS."""
    return FakeClock(START_MS)


@pytest.fixture
def window_params() -> WindowParams:
    """Reference grace-window durations."""
    return WindowParams(secure_assume_ms=3000, legacy_retain_ms=5000, legacy_suppress_ms=5000)


@pytest.fixture
def events() -> list:
    """Collects events reported to a machine observer."""
    return []


@pytest.fixture
def machine(clock, window_params, events) -> TokenStateMachine:
    """State machine driven by the fake clock."""
    return TokenStateMachine(
        params=window_params,
        now_fn=clock,
        observer=events.append,
        session_id="test-session",
    )


@pytest.fixture
def store(clock) -> InMemoryTokenStore:
    """Store whose writes lag reads, like the host's secret store and settings."""
    return InMemoryTokenStore(now_fn=clock, secret_delay_ms=200, setting_delay_ms=400)


@pytest.fixture
def service(store, machine) -> TokenService:
    return TokenService(store, machine)
