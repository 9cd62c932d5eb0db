"""YAML configuration for the feasibility driver."""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from feasibility.errors import InvalidInput

DEFAULTS: Dict[str, Any] = {
    "max_iterations": None,
    "log_level": "WARNING",
    "catalog": None,
    "examples": [],
}

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Check value types and ranges; return the config unchanged."""
    max_iterations = config["max_iterations"]
    if max_iterations is not None and (
        isinstance(max_iterations, bool) or not isinstance(max_iterations, int) or max_iterations <= 0
    ):
        raise InvalidInput(f"max_iterations must be a positive integer, got {max_iterations!r}")

    log_level = config["log_level"]
    if not isinstance(log_level, str) or log_level.upper() not in _LOG_LEVELS:
        raise InvalidInput(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}")

    if config["catalog"] is not None and not isinstance(config["catalog"], str):
        raise InvalidInput(f"catalog must be a path string, got {config['catalog']!r}")

    examples = config["examples"]
    if not isinstance(examples, list) or not all(isinstance(e, str) for e in examples):
        raise InvalidInput(f"examples must be a list of names, got {examples!r}")
    return config


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load YAML configuration merged over DEFAULTS.

    With no path, the defaults are returned.
    """
    config = dict(DEFAULTS)
    if path is None:
        return config

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidInput(f"config {path} must be a mapping")
    unknown = set(data) - set(DEFAULTS)
    if unknown:
        raise InvalidInput(f"config {path} has unknown keys: {sorted(unknown)}")

    config.update(data)
    return validate_config(config)
