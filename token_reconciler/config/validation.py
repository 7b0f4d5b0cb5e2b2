"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_window_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate grace-window durations."""
        errors = []

        for name in ("secure_assume_ms", "legacy_retain_ms", "legacy_suppress_ms"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer (milliseconds)",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_store_keys(params: dict[str, Any]) -> list[ValidationError]:
        """Validate secret store and setting keys."""
        errors = []

        for name in ("secret_key", "setting_key"):
            if name in params:
                value = params[name]
                if not isinstance(value, str) or not value.strip():
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-empty string",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_wait_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate wait_for_token_state polling parameters."""
        errors = []

        for name in ("timeout_ms", "poll_ms"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer (milliseconds)",
                    value=params[name]
                ))

        timeout = params.get("timeout_ms")
        poll = params.get("poll_ms")
        if _is_positive_int(timeout) and _is_positive_int(poll) and poll >= timeout:
            errors.append(ValidationError(
                field="poll_ms",
                message="Must be smaller than timeout_ms",
                value=poll
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in _LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {sorted(_LOG_LEVELS)}",
                    value=value
                ))

        for name in ("format_json", "debug_windows"):
            if name in params and not isinstance(params[name], bool):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a boolean",
                    value=params[name]
                ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if isinstance(config.get("windows"), dict):
            errors.extend(cls.validate_window_params(config["windows"]))
        if isinstance(config.get("keys"), dict):
            errors.extend(cls.validate_store_keys(config["keys"]))
        if isinstance(config.get("wait"), dict):
            errors.extend(cls.validate_wait_params(config["wait"]))
        if isinstance(config.get("logging"), dict):
            errors.extend(cls.validate_logging_params(config["logging"]))

        return errors
