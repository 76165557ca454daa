"""
CLI Configuration

Locates and loads the runtime configuration for the CLI.
Supports environment variables and YAML configuration files.
"""

from __future__ import annotations

from pathlib import Path

from core.config.runtime import RuntimeConfig


def default_config_paths() -> list[Path]:
    """Locations checked, in order, when no --config is given."""
    return [
        Path.cwd() / "streamtree.yaml",
        Path.cwd() / ".streamtree.yaml",
        Path.home() / ".config" / "streamtree" / "config.yaml",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file. A missing explicit path
            is an error; missing default paths are skipped.

    Returns:
        Merged configuration
    """
    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        config = RuntimeConfig()
        for default_path in default_config_paths():
            if default_path.exists():
                config = RuntimeConfig.from_yaml(default_path)
                break

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """# streamtree configuration
hash:
  # sha256, sha3_256 or blake2b_256
  algorithm: sha256
tree:
  # promote: an unpaired peak advances unchanged during root rebuild
  # empty_sibling: an unpaired peak is hashed against H(b"")
  lone_peak_policy: promote
  emit_events: false
logging:
  level: INFO
  file: null
"""
