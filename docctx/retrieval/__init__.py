"""
Ranking and page selection module for docctx.
"""

from .ranker import FuzzyRanker
from .resolver import (
    Resolution,
    filter_pages_by_query,
    generate_navigation,
    resolve_pages,
    select_pages_by_numbers,
)

__all__ = [
    "FuzzyRanker",
    "Resolution",
    "filter_pages_by_query",
    "generate_navigation",
    "resolve_pages",
    "select_pages_by_numbers",
]
