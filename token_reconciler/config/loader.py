"""Configuration loader with 3-tier parameter precedence."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    DefaultConfig,
    LoggingParams,
    StoreKeys,
    WaitParams,
    WindowParams,
    get_default_config,
)
from .validation import ConfigValidator, ValidationError

CONFIG_FILENAME = "token_reconciler.yaml"
DEBUG_ENV_VAR = "TOKEN_RECONCILER_DEBUG"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=config_dir,
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the YAML config file, if present."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        try:
            with open(config_file) as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"{config_file} is not valid YAML: {e}",
                context={"path": str(config_file)}
            ) from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{config_file} must contain a mapping",
                context={"path": str(config_file)}
            )

        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. YAML config file
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        if os.environ.get(DEBUG_ENV_VAR) == "1" and isinstance(config.get("logging"), dict):
            config["logging"]["debug_windows"] = True

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """
        Merge and validate configuration, returning typed parameters.

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        config = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(config)
        errors.extend(self._unknown_fields(config))
        if errors:
            raise ConfigurationError(
                "Invalid token reconciler configuration: "
                + "; ".join(f"{e.field}: {e.message}" for e in errors),
                errors=errors
            )

        return DefaultConfig(
            windows=WindowParams(**config["windows"]),
            keys=StoreKeys(**config["keys"]),
            wait=WaitParams(**config["wait"]),
            logging=LoggingParams(**config["logging"]),
        )

    def _unknown_fields(self, config: dict[str, Any]) -> list[ValidationError]:
        """Report sections or fields the defaults do not define."""
        known = self._dataclass_to_dict(self.defaults)
        errors = []

        for section, values in config.items():
            if section not in known:
                errors.append(ValidationError(section, "Unknown section", values))
                continue
            if not isinstance(values, dict):
                errors.append(ValidationError(section, "Must be a mapping", values))
                continue
            for name, value in values.items():
                if name not in known[section]:
                    errors.append(ValidationError(f"{section}.{name}", "Unknown field", value))

        return errors

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
