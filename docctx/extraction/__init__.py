"""
Structured extraction, token estimation and truncation for docctx.
"""

from .models import Page, ParsedQuery, ChatQuery, RankedResult, ExtractionStats
from .extractor import extract_pages, extract_chunks, generate_summary, parse_markdown_page
from .tokens import CHARS_PER_TOKEN, count_tokens, estimate_token_count
from .truncation import (
    TRUNCATION_MARKER,
    apply_size_limit,
    truncate_by_tokens,
    truncate_preserving_structure,
)
from .chat import clean_title, format_chat_history

__all__ = [
    "Page",
    "ParsedQuery",
    "ChatQuery",
    "RankedResult",
    "ExtractionStats",
    "extract_pages",
    "extract_chunks",
    "generate_summary",
    "parse_markdown_page",
    "CHARS_PER_TOKEN",
    "count_tokens",
    "estimate_token_count",
    "TRUNCATION_MARKER",
    "apply_size_limit",
    "truncate_by_tokens",
    "truncate_preserving_structure",
    "clean_title",
    "format_chat_history",
]
