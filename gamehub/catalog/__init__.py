"""
Catalog Module - The list of games on the portal.

Records are loaded from a JSON file and filtered with search_catalog.
"""

from .models import GameRecord
from .loader import load_catalog, parse_catalog, DEFAULT_CATALOG_PATH
from .search import search_catalog, find_record, categories

__all__ = [
    "GameRecord",
    "load_catalog",
    "parse_catalog",
    "DEFAULT_CATALOG_PATH",
    "search_catalog",
    "find_record",
    "categories",
]
