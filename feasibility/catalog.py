"""Loading of named example service sets from YAML."""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from feasibility.errors import InvalidInput
from feasibility.logger import get_logger
from feasibility.models import ServiceSet

LOGGER = get_logger("catalog")

DEFAULT_CATALOG = Path(__file__).with_name("catalog.yaml")

_ENTRY_KEYS = {"periods", "wcets", "deadlines", "names"}


def parse_entry(name: str, entry: Any) -> ServiceSet:
    """Build a ServiceSet from one catalog entry mapping."""
    if not isinstance(entry, dict):
        raise InvalidInput(f"catalog entry {name!r} must be a mapping, got {type(entry).__name__}")

    unknown = set(entry) - _ENTRY_KEYS
    if unknown:
        raise InvalidInput(f"catalog entry {name!r} has unknown keys: {sorted(unknown)}")
    missing = {"periods", "wcets"} - set(entry)
    if missing:
        raise InvalidInput(f"catalog entry {name!r} is missing keys: {sorted(missing)}")

    for key in _ENTRY_KEYS & set(entry):
        if not isinstance(entry[key], list):
            raise InvalidInput(f"catalog entry {name!r}: {key} must be a list")

    try:
        return ServiceSet.from_arrays(
            entry["periods"],
            entry["wcets"],
            deadlines=entry.get("deadlines"),
            names=entry.get("names"),
        )
    except InvalidInput as exc:
        raise InvalidInput(f"catalog entry {name!r}: {exc}") from exc


def load_catalog(path: Optional[Union[str, Path]] = None) -> Dict[str, ServiceSet]:
    """Load a catalog of service sets, keyed by name in file order.

    Args:
        path: YAML file to read. Defaults to the bundled examples.

    Raises:
        InvalidInput: If the file is not a mapping of valid entries.
    """
    path = Path(path) if path is not None else DEFAULT_CATALOG
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or not data:
        raise InvalidInput(f"catalog {path} must be a non-empty mapping of service sets")

    catalog = {str(name): parse_entry(str(name), entry) for name, entry in data.items()}
    LOGGER.info("Loaded %d service sets from %s", len(catalog), path)
    return catalog
