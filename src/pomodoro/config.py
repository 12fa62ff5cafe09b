"""Configuration layers for the Pomodoro timer.

Settings come from three places: command line flags, the user's config file
and built-in defaults. Each one is a :class:`PartialConfig` where ``None``
means "not set here"; layers are combined with ``|`` from highest to lowest
priority and then resolved into a :class:`ResolvedConfig`.
"""
from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

CONFIG_RELATIVE_PATH = Path(".config") / "pomodoro" / "config.toml"

DEFAULTS = {
    "duration_pomodoro": 25,
    "duration_short_break": 5,
    "duration_long_break": 30,
    "repetition": 4,
}


class ConfigError(Exception):
    """Raised when the timer configuration cannot be used."""


class ConfigIoError(ConfigError):
    """Raised when the config file exists but cannot be read."""


class ConfigMalformedError(ConfigError):
    """Raised when the config document does not have the expected shape."""


class ConfigNonPositiveError(ConfigError):
    """Raised when a duration or repetition is zero or negative."""


@dataclass(frozen=True)
class PartialConfig:
    """Durations in minutes; any field may be left unset."""

    duration_pomodoro: Optional[int] = None
    duration_short_break: Optional[int] = None
    duration_long_break: Optional[int] = None
    repetition: Optional[int] = None

    def __or__(self, other: PartialConfig) -> PartialConfig:
        if not isinstance(other, PartialConfig):
            return NotImplemented
        return merge(self, other)

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in _values(self).values())

    @property
    def is_complete(self) -> bool:
        return all(value is not None for value in _values(self).values())

    def resolve(self) -> ResolvedConfig:
        missing = [name for name, value in _values(self).items() if value is None]
        if missing:
            raise ConfigError(f"missing configuration values: {', '.join(missing)}")
        validate(self)
        return ResolvedConfig(**_values(self))


@dataclass(frozen=True)
class ResolvedConfig:
    """Fully populated configuration with every value greater than zero."""

    duration_pomodoro: int
    duration_short_break: int
    duration_long_break: int
    repetition: int


def _values(config: PartialConfig) -> dict[str, Optional[int]]:
    return {field.name: getattr(config, field.name) for field in fields(config)}


def merge(a: PartialConfig, b: PartialConfig) -> PartialConfig:
    """Combine two layers field by field, preferring values from ``a``."""
    first, second = _values(a), _values(b)
    return PartialConfig(
        **{name: first[name] if first[name] is not None else second[name] for name in first}
    )


def defaults() -> PartialConfig:
    return PartialConfig(**DEFAULTS)


def validate(config: PartialConfig) -> PartialConfig:
    """Reject any set value that is not a positive number."""
    for name, value in _values(config).items():
        if value is not None and value <= 0:
            raise ConfigNonPositiveError(f"{name} must be positive, got {value}")
    return config


def _as_int(value: Any, name: str) -> int:
    # bool is an int subclass, but `repetition = true` is a type error.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigMalformedError(
            f"{name} must be an integer, got {type(value).__name__}"
        )
    return value


def parse(document: str) -> PartialConfig:
    """Parse a TOML document into a :class:`PartialConfig`.

    Keys and tables the timer does not know about are ignored so that newer
    config files keep working with older versions.

    Raises:
        ConfigMalformedError: The document is not valid TOML or a known key
            does not hold an integer.
        ConfigNonPositiveError: A known key holds zero or a negative number.
    """
    try:
        raw: Mapping[str, Any] = tomllib.loads(document)
    except tomllib.TOMLDecodeError as error:
        raise ConfigMalformedError(f"invalid config document: {error}") from error

    values = {name: _as_int(raw[name], name) for name in DEFAULTS if name in raw}
    return validate(PartialConfig(**values))


def config_path(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / CONFIG_RELATIVE_PATH


def load(path: Optional[Path] = None) -> PartialConfig:
    """Read the config file, treating a missing file as an empty layer."""
    path = path or config_path()
    try:
        document = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No config file at %s, using defaults", path)
        return PartialConfig()
    except UnicodeDecodeError as error:
        raise ConfigMalformedError(f"config file {path} is not UTF-8: {error}") from error
    except OSError as error:
        raise ConfigIoError(f"cannot read config file {path}: {error}") from error

    logger.debug("Loaded config file %s", path)
    return parse(document)
