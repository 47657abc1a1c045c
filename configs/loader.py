"""Search-space configuration loading and validation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from codec.base import DecodePolicy
from codec.parameters import ParameterSpec
from core.errors import InvalidArgumentError


class ConfigValidationError(ValueError):
    """Raised when a search-space config fails validation."""


_REQUIRED_KEYS: tuple[str, ...] = ("parameters", "seed")
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class SearchSpaceConfig:
    """Validated search-space configuration container.

    Provides typed field access for the known settings and dictionary-style
    access for extensible optional settings.
    """

    parameters: tuple[ParameterSpec, ...]
    seed: int
    codec: str = "parameters"
    decode_policy: DecodePolicy = DecodePolicy.STRICT
    max_workers: int = 4
    log_level: str = "INFO"
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a configuration value by key.

        Args:
            key: Configuration key name.
            default: Value to return if key does not exist.

        Returns:
            Value associated with ``key`` or ``default``.
        """
        if key in self.__dataclass_fields__ and key != "extras":
            return getattr(self, key)
        return self.extras.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return a full dictionary view of the configuration."""
        payload = {
            "codec": self.codec,
            "seed": self.seed,
            "decode_policy": self.decode_policy.value,
            "max_workers": self.max_workers,
            "logging": {"level": self.log_level},
            "parameters": [
                {"name": spec.name, "kind": spec.kind, "minimum": spec.minimum, "maximum": spec.maximum}
                for spec in self.parameters
            ],
        }
        payload.update(self.extras)
        return payload


class ConfigLoader:
    """Load and validate search-space configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> SearchSpaceConfig:
        """Load a single search-space config from ``path``.

        Args:
            path: Path to a YAML or JSON config file.

        Returns:
            A validated ``SearchSpaceConfig`` instance.
        """
        payload = _read_config_payload(path)
        if not isinstance(payload, Mapping):
            raise ConfigValidationError("Config file must contain a mapping object.")
        return _validate_and_build(payload)


def configure_logging(config: SearchSpaceConfig) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(level=getattr(logging, config.log_level))


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigValidationError(f"Config file not found: {config_path}")
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    try:
        if suffix == ".json":
            return json.loads(content)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Failed to parse config '{config_path}': {exc}") from exc

    raise ConfigValidationError(f"Unsupported config extension: {suffix}")


def _require_int(payload: Mapping[str, Any], key: str, default: int | None = None) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(f"Field '{key}' expected int, got {type(value).__name__}.")
    return value


def _build_parameters(raw: Any) -> tuple[ParameterSpec, ...]:
    if not isinstance(raw, list) or not raw:
        raise ConfigValidationError("'parameters' must be a non-empty list of mappings.")
    specs: list[ParameterSpec] = []
    for index, item in enumerate(raw):
        if not isinstance(item, Mapping):
            raise ConfigValidationError(f"Parameter #{index} must be a mapping.")
        for bound in ("minimum", "maximum"):
            value = item.get(bound)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigValidationError(f"Parameter #{index} field '{bound}' must be a number.")
        try:
            specs.append(ParameterSpec.from_mapping(item))
        except InvalidArgumentError as exc:
            raise ConfigValidationError(str(exc)) from exc
    names = [spec.name for spec in specs]
    if len(set(names)) != len(names):
        raise ConfigValidationError(f"Parameter names must be unique: {names}")
    return tuple(specs)


def _validate_and_build(payload: Mapping[str, Any]) -> SearchSpaceConfig:
    """Validate raw mapping and build ``SearchSpaceConfig``."""
    missing = [key for key in _REQUIRED_KEYS if key not in payload]
    if missing:
        raise ConfigValidationError(f"Missing required config keys: {', '.join(missing)}")

    parameters = _build_parameters(payload["parameters"])
    seed = _require_int(payload, "seed")
    max_workers = _require_int(payload, "max_workers", 4)
    if max_workers <= 0:
        raise ConfigValidationError("max_workers must be > 0")

    codec = payload.get("codec", "parameters")
    if not isinstance(codec, str) or not codec:
        raise ConfigValidationError("codec must be a non-empty string")

    try:
        decode_policy = DecodePolicy(str(payload.get("decode_policy", DecodePolicy.STRICT.value)).lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in DecodePolicy)
        raise ConfigValidationError(f"decode_policy must be one of: {choices}") from exc

    logging_section = payload.get("logging", {})
    if not isinstance(logging_section, Mapping):
        raise ConfigValidationError("Section 'logging' must be a mapping.")
    log_level = str(logging_section.get("level", "INFO")).upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigValidationError(f"logging.level must be one of: {', '.join(sorted(_LOG_LEVELS))}")

    known = set(_REQUIRED_KEYS) | {"codec", "decode_policy", "max_workers", "logging"}
    extras = {k: v for k, v in payload.items() if k not in known}

    return SearchSpaceConfig(
        parameters=parameters,
        seed=seed,
        codec=codec,
        decode_policy=decode_policy,
        max_workers=max_workers,
        log_level=log_level,
        extras=extras,
    )
