"""
Catalog Loader - Reads the game catalog from a JSON file.

The catalog is a JSON array of game records. Loading never raises
on bad data: a missing or malformed file yields an empty catalog,
and invalid records are skipped. Every problem is logged.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .models import GameRecord

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.json"


def load_catalog(path: str | Path | None = None) -> list[GameRecord]:
    """
    Load catalog records.

    Args:
        path: JSON file to read; defaults to the packaged catalog

    Returns:
        Valid records in file order
    """
    path = Path(path).expanduser() if path else DEFAULT_CATALOG_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("Catalog file not found: %s", path)
        return []
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read catalog %s: %s", path, e)
        return []

    return parse_catalog(data, source=str(path))


def parse_catalog(data, source: str = "<data>") -> list[GameRecord]:
    """Validate raw catalog data, skipping bad records."""
    if not isinstance(data, list):
        logger.error("Catalog %s must be a JSON array, got %s", source, type(data).__name__)
        return []

    records = []
    seen_ids = set()
    for index, item in enumerate(data):
        try:
            record = GameRecord.model_validate(item)
        except ValidationError as e:
            logger.warning(
                "Skipping invalid catalog record #%d in %s: %s",
                index, source, e.errors()[0].get("msg", e),
            )
            continue
        if record.id in seen_ids:
            logger.warning("Skipping duplicate catalog id %d in %s", record.id, source)
            continue
        seen_ids.add(record.id)
        records.append(record)
    return records
