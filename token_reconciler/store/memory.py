"""
In-memory token store with deterministic propagation delay.

Every write becomes visible to reads only once the injected clock reaches
`write_time + delay`. This reproduces the write-then-read races of the real
host stores without sleeping.
"""

from dataclasses import dataclass
from typing import Optional

from ..errors import StoreReadError, StoreWriteError
from ..logging.config import get_store_logger
from ..utils.time import NowFn, resolve_now
from .base import ConfigurationScope, TokenStore

logger = get_store_logger(__name__)

# Most specific scope first
_SCOPE_PRECEDENCE = (
    ConfigurationScope.WORKSPACE_FOLDER,
    ConfigurationScope.WORKSPACE,
    ConfigurationScope.GLOBAL,
)


@dataclass(frozen=True)
class _PendingWrite:
    value: Optional[str]
    visible_at: int


class _DelayedCell:
    """Write history of one key; reads see the latest visible write."""

    def __init__(self):
        self.writes: list[_PendingWrite] = []

    def write(self, value: Optional[str], visible_at: int) -> None:
        self.writes.append(_PendingWrite(value, visible_at))

    def read(self, now: int) -> Optional[str]:
        latest = None
        for w in self.writes:
            # Ties go to the later write
            if w.visible_at <= now and (latest is None or w.visible_at >= latest.visible_at):
                latest = w
        if latest is not None:
            # Visible writes older than the latest can never be read again
            self.writes = [w for w in self.writes if w is latest or w.visible_at > now]
        return latest.value if latest else None


class InMemoryTokenStore(TokenStore):
    """Reference TokenStore used by simulations and tests."""

    def __init__(
        self,
        now_fn: Optional[NowFn] = None,
        secret_delay_ms: int = 0,
        setting_delay_ms: int = 0
    ):
        self.now_fn = now_fn
        self.secret_delay_ms = secret_delay_ms
        self.setting_delay_ms = setting_delay_ms
        self.fail_reads = False
        self.fail_writes = False
        self._secrets: dict[str, _DelayedCell] = {}
        self._settings: dict[tuple[ConfigurationScope, str], _DelayedCell] = {}

    def _now(self) -> int:
        return resolve_now(None, self.now_fn)

    def _check_read(self, operation: str, key: str) -> None:
        if self.fail_reads:
            raise StoreReadError(f"{operation} failed for {key}", operation=operation, key=key)

    def _check_write(self, operation: str, key: str, scope: Optional[str] = None) -> None:
        if self.fail_writes:
            raise StoreWriteError(f"{operation} failed for {key}", operation=operation,
                                  key=key, scope=scope)

    async def secret_get(self, key: str) -> Optional[str]:
        self._check_read("secret_get", key)
        cell = self._secrets.get(key)
        return cell.read(self._now()) if cell else None

    async def secret_set(self, key: str, value: str) -> None:
        self._check_write("secret_set", key)
        self._secrets.setdefault(key, _DelayedCell()).write(value, self._now() + self.secret_delay_ms)
        logger.debug("Secret write issued", key=key, delay_ms=self.secret_delay_ms)

    async def secret_delete(self, key: str) -> None:
        self._check_write("secret_delete", key)
        self._secrets.setdefault(key, _DelayedCell()).write(None, self._now() + self.secret_delay_ms)
        logger.debug("Secret delete issued", key=key, delay_ms=self.secret_delay_ms)

    def setting_get(self, key: str) -> Optional[str]:
        self._check_read("setting_get", key)
        now = self._now()
        for scope in _SCOPE_PRECEDENCE:
            cell = self._settings.get((scope, key))
            if cell is None:
                continue
            value = cell.read(now)
            if value is not None:
                return value
        return None

    async def setting_set(self, key: str, value: Optional[str],
                          scope: ConfigurationScope = ConfigurationScope.GLOBAL) -> None:
        self._check_write("setting_set", key, scope=scope.value)
        cell = self._settings.setdefault((scope, key), _DelayedCell())
        cell.write(value, self._now() + self.setting_delay_ms)
        logger.debug("Setting write issued", key=key, scope=scope.value,
                     delay_ms=self.setting_delay_ms)
