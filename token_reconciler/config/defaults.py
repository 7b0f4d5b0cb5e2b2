"""Default configuration parameters for the token reconciler."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WindowParams:
    """Grace-window durations in milliseconds."""
    secure_assume_ms: int = 3000        # Assume secure present until secret read catches up
    legacy_retain_ms: int = 5000        # Keep plaintext classified present after a keep-migration
    legacy_suppress_ms: int = 5000      # Ignore stale plaintext reads after it was cleared


@dataclass(frozen=True)
class StoreKeys:
    """Keys used against the secret store and settings."""
    secret_key: str = "copilotPremiumUsageMonitor.token"
    setting_key: str = "token"


@dataclass(frozen=True)
class WaitParams:
    """Polling parameters for wait_for_token_state."""
    timeout_ms: int = 1500
    poll_ms: int = 40


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False
    debug_windows: bool = False         # Log window snapshot on every derived state


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    windows: WindowParams
    keys: StoreKeys
    wait: WaitParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        windows=WindowParams(),
        keys=StoreKeys(),
        wait=WaitParams(),
        logging=LoggingParams(),
    )
