#!/usr/bin/env python3
"""
Token Migration Demo - Token Reconciler

This script walks a simulated session through the credential lifecycle
against a store whose writes lag behind reads:
- LEGACY_ONLY → migrate (keep plaintext) → BOTH
- BOTH → clear plaintext → SECURE_ONLY
- SECURE_ONLY → clear secure token → NONE

Time is simulated, so the propagation windows can be stepped through.

Run: python examples/token_migration_demo.py
"""

import asyncio

from token_reconciler.config.loader import ConfigLoader
from token_reconciler.logging.config import setup_logging
from token_reconciler.service import TokenService
from token_reconciler.store.memory import InMemoryTokenStore
from token_reconciler.utils.time import FakeClock


class TransitionTracker:
    """Collects audit events from the state machine."""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    def print_summary(self):
        print("📊 TRANSITION SUMMARY")
        print("=" * 50)
        for event in self.events:
            if event.kind == "transition":
                from_state = event.from_state.value if event.from_state else "-"
                print(f"  t={event.timestamp:>6} {from_state:>12} → {event.to_state.value}")
            else:
                print(f"  t={event.timestamp:>6} {event.kind}")


async def show(service: TokenService, clock: FakeClock, label: str, steps: int = 4,
               step_ms: int = 150) -> None:
    """Print derived state and hints over a few propagation steps."""
    print(f"\n▶ {label}")
    for _ in range(steps):
        derived = await service.current_state()
        hints = await service.current_hints()
        print(f"  t={clock():>6} state={derived.state.value:<12} "
              f"indicator={hints.indicator_style:<8} {service.machine.debug_snapshot()}")
        clock.advance(step_ms)


async def run_demo(config) -> None:
    clock = FakeClock(0)
    tracker = TransitionTracker()
    store = InMemoryTokenStore(now_fn=clock, secret_delay_ms=200, setting_delay_ms=400)
    service = TokenService.from_config(store, config, now_fn=clock,
                                       observer=tracker, session_id="demo")

    await store.setting_set(service.keys.setting_key, "ghp_plaintext_demo")
    clock.advance(500)
    await show(service, clock, "Plaintext token in settings", steps=1)

    await service.migrate_setting_token(remove_setting=False)
    await show(service, clock, "Migrated, plaintext kept")

    clock.advance(6000)
    await service.clear_plaintext()
    await show(service, clock, "Plaintext copy cleared")

    clock.advance(6000)
    await service.clear_token()
    await show(service, clock, "Secure token cleared")

    print()
    tracker.print_summary()


def main():
    config = ConfigLoader.create().load({"logging": {"level": "WARNING"}})
    setup_logging(config.logging)
    print("🔐 TOKEN RECONCILER - MIGRATION DEMO")
    print("=" * 50)
    asyncio.run(run_demo(config))


if __name__ == "__main__":
    main()
