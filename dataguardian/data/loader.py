"""
Data loader for the tracker taxonomy shipped with the package.

The JSON data files live alongside this module in the ``trackers/``
subdirectory and are parsed into Pydantic models once, on first use.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any

import pydantic

from dataguardian.models import tracking

# Resolve path to the data directory (same directory as this module)
_DATA_DIR = pathlib.Path(__file__).resolve().parent

# ============================================================================
# JSON File Loading
# ============================================================================


def _load_json(relative_path: str) -> Any:
    """Load and parse a JSON file relative to the data directory.

    Raises:
        FileNotFoundError: If the JSON file does not exist.
        json.JSONDecodeError: If the file contains invalid JSON.
    """
    full_path = _DATA_DIR / relative_path
    if not full_path.exists():
        raise FileNotFoundError(f"Data file not found: {relative_path}")
    with open(full_path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise json.JSONDecodeError(
                f"Invalid JSON in {relative_path}: {exc.msg}",
                exc.doc,
                exc.pos,
            ) from exc


# ============================================================================
# Tracker Taxonomy
# ============================================================================

_taxonomy_adapter = pydantic.TypeAdapter(list[tracking.TaxonomyEntry])

_taxonomy: tuple[tracking.TaxonomyEntry, ...] | None = None


def get_taxonomy() -> tuple[tracking.TaxonomyEntry, ...]:
    """Get the tracker taxonomy in table order (lazy loaded and cached)."""
    global _taxonomy
    if _taxonomy is None:
        entries = _taxonomy_adapter.validate_python(_load_json("trackers/taxonomy.json"))
        _taxonomy = tuple(entries)
    return _taxonomy
