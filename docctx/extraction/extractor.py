"""
Extraction of markdown pages from server-rendered documentation HTML.

deepwiki.com streams its wiki pages to the browser as Next.js flight
payloads: ``self.__next_f.push([1,"..."])`` calls whose second element is a
JSON string literal. Some of those literals are complete markdown pages;
the rest are metadata. This module recovers the pages in document order.
"""

import json
import re
from typing import Callable, List, Optional

from ..utils.helpers import truncate_at_word
from ..utils.logging import get_logger
from .models import ExtractionStats, Page
from .tokens import estimate_token_count

logger = get_logger(__name__)

NEXT_F_PUSH = re.compile(r'self\.__next_f\.push\(\[1,"((?:[^"\\]|\\.)*)"\]\)')
H1_HEADING = re.compile(r'^#\s+(.+)$', re.MULTILINE)
H2_HEADING = re.compile(r'^##\s+(.+)$', re.MULTILINE)

# Collapsible "Relevant source files" block deepwiki puts at the top of pages
SOURCES_BLOCK = re.compile(
    r'<details>\s*<summary>\s*Relevant source files\s*</summary>[\s\S]*?</details>[ \t]*\n?',
    re.IGNORECASE,
)

LEAD_IN_PATTERNS = [
    re.compile(r'^The following files were used as context.*?:', re.IGNORECASE),
    re.compile(r'^This (?:page|document|section) (?:provides|contains|describes).*?:', re.IGNORECASE),
]

MIN_MARKDOWN_LENGTH = 100
SUMMARY_SCAN_LENGTH = 200
SUMMARY_MAX_LENGTH = 150
SUMMARY_PLACEHOLDER = "Summary for this page is not available."


def extract_chunks(html: str, stats: Optional[ExtractionStats] = None) -> List[str]:
    """Decode every flight payload string found in html, skipping malformed ones."""
    chunks = []
    for match in NEXT_F_PUSH.finditer(html or ""):
        if stats is not None:
            stats.chunks_found += 1
        try:
            chunks.append(json.loads(f'"{match.group(1)}"'))
        except json.JSONDecodeError as e:
            logger.debug(f"Skipping undecodable chunk at offset {match.start()}: {e}")
            if stats is not None:
                stats.chunks_undecodable += 1
    return chunks


def is_markdown_content(chunk: str) -> bool:
    """Check whether a chunk looks like a full markdown page."""
    trimmed = chunk.strip()
    return trimmed.startswith('#') and len(trimmed) > MIN_MARKDOWN_LENGTH


def strip_boilerplate(content: str) -> str:
    """Remove wrapper blocks that are not part of the page body."""
    return SOURCES_BLOCK.sub('', content)


def extract_sub_headings(content: str) -> List[str]:
    """Return level-2 heading texts in document order."""
    return [heading.strip() for heading in H2_HEADING.findall(content)]


def generate_summary(content: str) -> str:
    """Build a short summary from the first paragraph after the h1 heading."""
    paragraph = ""
    in_first_section = False

    for line in content.split('\n'):
        trimmed = line.strip()

        if re.match(r'^#\s+', trimmed):
            in_first_section = True
            continue

        if not in_first_section:
            continue

        # Next heading ends the first section
        if re.match(r'^#{2,}\s+', trimmed):
            break

        if (not trimmed or trimmed.startswith('<') or trimmed.startswith('```')
                or trimmed.startswith('---')):
            if paragraph:
                break
            continue

        paragraph = f"{paragraph} {trimmed}" if paragraph else trimmed

        if len(paragraph) > SUMMARY_SCAN_LENGTH:
            break

    summary = paragraph
    for pattern in LEAD_IN_PATTERNS:
        summary = pattern.sub('', summary)
    summary = re.sub(r'<[^>]*>', '', summary)
    summary = re.sub(r'&\w+;', ' ', summary)
    summary = re.sub(r'\s+', ' ', summary).strip()

    summary = truncate_at_word(summary, SUMMARY_MAX_LENGTH)

    return summary or SUMMARY_PLACEHOLDER


def parse_markdown_page(chunk: str, size_fn: Callable[[str], int] = estimate_token_count) -> Page:
    """Parse one markdown chunk into a Page.

    Raises ValueError when the chunk has no h1 heading.
    """
    h1_match = H1_HEADING.search(chunk)
    if not h1_match:
        raise ValueError("h1 heading not found")

    content = strip_boilerplate(chunk)

    return Page(
        heading=h1_match.group(1).strip(),
        sub_headings=tuple(extract_sub_headings(content)),
        summary=generate_summary(content),
        content=content,
        size=size_fn(content),
    )


def extract_pages(raw_document: str,
                  size_fn: Callable[[str], int] = estimate_token_count,
                  stats: Optional[ExtractionStats] = None) -> List[Page]:
    """Extract all markdown pages from a raw HTML document, in document order.

    Chunks that fail to decode or parse are dropped individually; a document
    without any usable chunk yields an empty list.
    """
    pages = []

    for chunk in extract_chunks(raw_document, stats):
        if not is_markdown_content(chunk):
            if stats is not None:
                stats.chunks_not_markdown += 1
            continue

        try:
            pages.append(parse_markdown_page(chunk, size_fn))
        except ValueError as e:
            logger.warning(f"Page parse error: {e}")
            if stats is not None:
                stats.pages_dropped += 1
                stats.errors.append(str(e))

    logger.debug(f"Extracted {len(pages)} pages")
    return pages
