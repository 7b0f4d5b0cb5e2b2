"""
Credential flows on top of the token store and state machine.

Every mutating flow calls its recorder synchronously before issuing the
async store writes, so a state query that lands while those writes are in
flight already reflects the requested outcome.
"""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .config.defaults import (
    DefaultConfig,
    LoggingParams,
    StoreKeys,
    WaitParams,
    get_default_config,
)
from .errors import InvalidTokenError, StoreReadError, StoreWriteError
from .logging.config import get_store_logger
from .state.hints import TokenHints, derive_hints
from .state.machine import Observer, TokenStateMachine
from .state.models import DerivedTokenState
from .store.base import ConfigurationScope, TokenStore
from .utils.time import NowFn

logger = get_store_logger(__name__)


class TokenSource(str, Enum):
    """Where the effective token was read from."""
    SECRET_STORAGE = "secretStorage"
    SETTINGS = "settings"
    NONE = "none"


@dataclass(frozen=True)
class StoredTokenInfo:
    token: Optional[str]
    source: TokenSource


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class TokenService:
    """Samples both stores and runs the set, clear and migrate flows."""

    def __init__(
        self,
        store: TokenStore,
        machine: Optional[TokenStateMachine] = None,
        keys: Optional[StoreKeys] = None,
        wait: Optional[WaitParams] = None,
        logging_params: Optional[LoggingParams] = None
    ):
        self.store = store
        self.machine = machine or TokenStateMachine()
        self.keys = keys or StoreKeys()
        self.wait = wait or WaitParams()
        self.debug_windows = (logging_params or LoggingParams()).debug_windows
        self.logger = logger.bind(session_id=self.machine.session_id)

    @classmethod
    def from_config(
        cls,
        store: TokenStore,
        config: Optional[DefaultConfig] = None,
        now_fn: Optional[NowFn] = None,
        observer: Optional[Observer] = None,
        session_id: str = "default"
    ) -> "TokenService":
        """Build a service and its own state machine from loaded configuration."""
        config = config or get_default_config()
        machine = TokenStateMachine(
            params=config.windows,
            now_fn=now_fn,
            observer=observer,
            session_id=session_id,
        )
        return cls(store, machine, keys=config.keys, wait=config.wait,
                   logging_params=config.logging)

    async def _read_secret(self) -> Optional[str]:
        try:
            return _clean(await self.store.secret_get(self.keys.secret_key))
        except StoreReadError as e:
            self.logger.warning("Secret read failed, treating as absent", error=str(e))
            return None

    def _read_setting(self) -> Optional[str]:
        try:
            return _clean(self.store.setting_get(self.keys.setting_key))
        except StoreReadError as e:
            self.logger.warning("Setting read failed, treating as absent", error=str(e))
            return None

    async def sample_presence(self) -> tuple[bool, bool]:
        """Raw (secret_present, legacy_present_raw); unreadable counts as absent."""
        secret = await self._read_secret()
        legacy = self._read_setting()
        return secret is not None, legacy is not None

    async def current_state(self, now: Optional[int] = None) -> DerivedTokenState:
        secret_present, legacy_present_raw = await self.sample_presence()
        derived = self.machine.derive_token_state(secret_present, legacy_present_raw, now=now)

        if self.debug_windows:
            self.logger.debug(
                "Token state sampled",
                state=derived.state.value,
                windows=self.machine.debug_snapshot(now),
            )

        return derived

    async def current_hints(self, now: Optional[int] = None) -> TokenHints:
        return derive_hints(await self.current_state(now))

    async def read_stored_token(self) -> StoredTokenInfo:
        """
        Resolve the token to use for billing requests.

        When both copies exist and differ, the plaintext setting wins so the
        user is prompted to clear or migrate it.
        """
        secret = await self._read_secret()
        legacy = self._read_setting()

        if legacy and secret and legacy != secret:
            self.logger.info("Secret and plaintext tokens diverge, preferring settings")
            return StoredTokenInfo(legacy, TokenSource.SETTINGS)
        if secret:
            return StoredTokenInfo(secret, TokenSource.SECRET_STORAGE)
        if legacy:
            return StoredTokenInfo(legacy, TokenSource.SETTINGS)
        return StoredTokenInfo(None, TokenSource.NONE)

    async def set_token_secure(self, token: str) -> None:
        """
        Store a token in the secret store and clear the plaintext copy.

        Raises:
            InvalidTokenError: If the token is blank
            StoreWriteError: If either write fails
        """
        token = _clean(token)
        if token is None:
            raise InvalidTokenError("Token must not be empty", source="input")

        self.machine.record_secure_set()
        await self.store.secret_set(self.keys.secret_key, token)
        await self.store.setting_set(self.keys.setting_key, "", ConfigurationScope.GLOBAL)
        self.logger.info("Secure token stored, plaintext cleared")

    async def clear_token(self) -> None:
        """Remove the secure token. Best effort: a failed delete is logged."""
        self.machine.record_secure_cleared()
        try:
            await self.store.secret_delete(self.keys.secret_key)
        except StoreWriteError as e:
            self.logger.warning("Secret delete failed", error=str(e))
            return
        self.logger.info("Secure token cleared")

    async def clear_plaintext(self) -> None:
        """Remove the plaintext copy, keeping any secure token."""
        self.machine.record_plaintext_cleared()
        await self.store.setting_set(self.keys.setting_key, "", ConfigurationScope.GLOBAL)
        self.logger.info("Plaintext token cleared")

    async def migrate_setting_token(self, remove_setting: bool) -> bool:
        """
        Copy the plaintext token into the secret store.

        Args:
            remove_setting: Also clear the plaintext copy

        Returns:
            False when there is nothing to migrate, True otherwise
        """
        legacy = self._read_setting()
        if legacy is None:
            return False

        current = await self._read_secret()
        if current == legacy:
            self.logger.debug("Plaintext token already migrated")
            return False

        if remove_setting:
            self.machine.record_secure_set()
        else:
            self.machine.record_migration_keep()

        await self.store.secret_set(self.keys.secret_key, legacy)
        if remove_setting:
            await self.store.setting_set(self.keys.setting_key, "", ConfigurationScope.GLOBAL)

        self.logger.info("Plaintext token migrated", removed_setting=remove_setting)
        return True

    async def wait_for_token_state(
        self,
        predicate: Callable[[DerivedTokenState], bool],
        timeout_ms: Optional[int] = None,
        poll_ms: Optional[int] = None
    ) -> bool:
        """Poll the derived state until `predicate` holds or the timeout lapses."""
        timeout_ms = self.wait.timeout_ms if timeout_ms is None else timeout_ms
        poll_ms = self.wait.poll_ms if poll_ms is None else poll_ms
        deadline = time.monotonic() + timeout_ms / 1000

        while True:
            if predicate(await self.current_state()):
                return True
            if time.monotonic() >= deadline:
                return False
            await asyncio.sleep(poll_ms / 1000)
