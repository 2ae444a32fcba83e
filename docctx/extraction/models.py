"""
Data models for the extraction and retrieval pipeline.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


@dataclass(frozen=True)
class Page:
    """One logical documentation page extracted from a source document."""
    heading: str
    sub_headings: Tuple[str, ...]
    summary: str
    content: str
    size: int


@dataclass
class ParsedQuery:
    """Repository query, optionally narrowed by search text or page numbers."""
    repo_name: str
    search_query: Optional[str] = None
    page_numbers: Optional[List[int]] = None


@dataclass
class ChatQuery:
    """Reference to a deepwiki chat session."""
    session_id: str
    type: str = "chat"


@dataclass
class RankedResult:
    """A ranking candidate with its relevance score and input position."""
    item: Any
    score: float
    index: int


@dataclass
class ExtractionStats:
    """Counters collected during a single extraction pass."""
    chunks_found: int = 0
    chunks_undecodable: int = 0
    chunks_not_markdown: int = 0
    pages_dropped: int = 0
    errors: List[str] = field(default_factory=list)
