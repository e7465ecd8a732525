"""Configuration loading and management."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from profqc.utils.exceptions import ConfigError

DEFAULTS_PATH = Path(__file__).parent.parent / "qc" / "thresholds" / "defaults.yml"


def load_config(
    filepath: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the run configuration.

    The packaged defaults are read first, then the user file and finally
    ``overrides`` (typically from command-line options) are merged on top.

    Args:
        filepath: Path to a YAML config file. If None, only defaults apply.
        overrides: Values taking precedence over both files.

    Returns:
        Configuration dictionary.

    Raises:
        ConfigError: If the user file is missing, unparsable or not a mapping.
    """
    config = _read_yaml(DEFAULTS_PATH) if DEFAULTS_PATH.exists() else {}

    if filepath:
        user_path = Path(filepath)
        if not user_path.exists():
            raise ConfigError(f"Config file not found: {user_path}")
        config = merge_configs(config, _read_yaml(user_path))

    if overrides:
        config = merge_configs(config, overrides)

    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    import yaml

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return data


def merge_configs(base: dict, override: dict) -> dict:
    """Recursively merge configuration dictionaries.

    Nested mappings such as ``ICheck_BigGaps`` are merged key by key;
    everything else in ``override`` replaces the value in ``base``.
    """
    result = base.copy()

    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def save_config(config: dict, filepath: str | Path) -> None:
    """Save configuration to a YAML file."""
    import yaml

    with open(filepath, "w") as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
