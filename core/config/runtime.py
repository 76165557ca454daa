"""
Runtime Configuration

Central configuration for accumulator construction and logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

import yaml
from dotenv import load_dotenv

from core.crypto.hashing import HASH_FUNCTIONS
from core.merkle.accumulator import LonePeakPolicy
from core.schemas.errors import ConfigurationException

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "STREAMTREE_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_SECTIONS = ("hash", "tree", "logging")


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class HashConfig:
    """Configuration for the hash collaborator."""
    algorithm: str = "sha256"

    def __post_init__(self):
        self.algorithm = self.algorithm.strip().lower()
        if self.algorithm not in HASH_FUNCTIONS:
            raise ConfigurationException(
                f"Unknown hash algorithm {self.algorithm!r}, expected one of {sorted(HASH_FUNCTIONS)}",
                field_path="hash.algorithm",
            )


@dataclass
class TreeConfig:
    """Configuration for tree shape and instrumentation."""
    lone_peak_policy: str = LonePeakPolicy.PROMOTE.value
    emit_events: bool = False

    def __post_init__(self):
        try:
            self.lone_peak_policy = LonePeakPolicy(self.lone_peak_policy).value
        except ValueError as e:
            raise ConfigurationException(
                f"Unknown lone peak policy {self.lone_peak_policy!r}, "
                f"expected one of {[p.value for p in LonePeakPolicy]}",
                field_path="tree.lone_peak_policy",
            ) from e


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None

    def __post_init__(self):
        self.level = self.level.upper()
        if self.level not in _LOG_LEVELS:
            raise ConfigurationException(
                f"Unknown log level {self.level!r}, expected one of {list(_LOG_LEVELS)}",
                field_path="logging.level",
            )


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hash: HashConfig = field(default_factory=HashConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - STREAMTREE_HASH_ALGORITHM: sha256, sha3_256 or blake2b_256
        - STREAMTREE_LONE_PEAK_POLICY: promote or empty_sibling
        - STREAMTREE_EMIT_EVENTS: Log merge/rebuild events (true/false)
        - STREAMTREE_LOG_LEVEL: Log level
        - STREAMTREE_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("hash", {})["algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")

        if os.getenv(f"{ENV_PREFIX}LONE_PEAK_POLICY"):
            overrides.setdefault("tree", {})["lone_peak_policy"] = os.getenv(f"{ENV_PREFIX}LONE_PEAK_POLICY")
        if os.getenv(f"{ENV_PREFIX}EMIT_EVENTS"):
            overrides.setdefault("tree", {})["emit_events"] = _env_flag(
                os.getenv(f"{ENV_PREFIX}EMIT_EVENTS", "false")
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationException(f"Could not parse config file {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationException(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        unknown = sorted(str(key) for key in data if key not in _SECTIONS)
        if unknown:
            raise ConfigurationException(
                f"Unknown config section(s) {unknown}, expected one of {list(_SECTIONS)}",
                field_path=unknown[0],
            )

        sections: dict[str, dict[str, Any]] = {}
        for name in _SECTIONS:
            section = data.get(name) or {}
            if not isinstance(section, dict):
                raise ConfigurationException(f"Config section {name!r} must be a mapping", field_path=name)
            sections[name] = section

        try:
            return cls(
                hash=HashConfig(**sections["hash"]),
                tree=TreeConfig(**sections["tree"]),
                logging=LoggingConfig(**sections["logging"]),
            )
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration: {e}") from e

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        merged = self.to_dict()
        for section, values in overrides.items():
            merged.setdefault(section, {}).update(values)
        return RuntimeConfig.from_dict(merged)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hash": {
                "algorithm": self.hash.algorithm,
            },
            "tree": {
                "lone_peak_policy": self.tree.lone_peak_policy,
                "emit_events": self.tree.emit_events,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set the default runtime configuration (None resets to env on next get)."""
    global _default_config
    _default_config = config
