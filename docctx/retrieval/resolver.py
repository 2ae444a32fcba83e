"""
Selection of extracted pages for a parsed query.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..config.settings import DeepwikiSettings
from ..extraction.models import Page, ParsedQuery
from ..extraction.tokens import estimate_token_count
from ..utils.helpers import format_number
from .ranker import FuzzyRanker

SEARCH_LIMIT = 20
MAX_NAVIGATION_PAGES = 20
MAX_NAVIGATION_SECTIONS = 5

# Heading matches outrank summary and section matches
PAGE_FIELDS = [("heading", 1.0), ("summary", 0.8), ("sub_headings", 0.8)]


@dataclass
class Resolution:
    """Pages chosen for a query; a navigation resolution holds one synthetic page."""
    pages: List[Page]
    is_navigation: bool = False


def select_pages_by_numbers(pages: Sequence[Page], page_numbers: Sequence[int]) -> List[Page]:
    """Select pages by 1-based position in the requested order, dropping out-of-range numbers."""
    return [pages[number - 1] for number in page_numbers if 1 <= number <= len(pages)]


def filter_pages_by_query(pages: Sequence[Page], query: Optional[str],
                          ranker: Optional[FuzzyRanker] = None,
                          limit: int = SEARCH_LIMIT) -> List[Page]:
    """Return pages matching query, best first; all pages when query is empty."""
    if not query or not query.strip():
        return list(pages)

    ranker = ranker or FuzzyRanker()
    return [result.item for result in ranker.rank(query, pages, PAGE_FIELDS, limit)]


def generate_navigation(pages: Sequence[Page], repo_name: str, size_unit: str = "tokens") -> str:
    """Render a markdown index of pages for an agent to pick from by number."""
    if not pages:
        return f"No wiki pages found for {repo_name}."

    entries = []
    for number, page in enumerate(pages[:MAX_NAVIGATION_PAGES], 1):
        if page.sub_headings:
            main_sections = ", ".join(page.sub_headings[:MAX_NAVIGATION_SECTIONS])
            if len(page.sub_headings) > MAX_NAVIGATION_SECTIONS:
                main_sections += "..."
        else:
            main_sections = "None"

        entries.append(
            f"### {number}. {page.heading}\n"
            f"- **Summary**: {page.summary}\n"
            f"- **Main sections**: {main_sections}\n"
            f"- **Size**: {format_number(page.size)} {size_unit}"
        )

    page_list = "\n\n".join(entries)

    return (
        f"This is the wiki for {repo_name}.\n\n"
        "From the following wiki pages, select the pages that best fit the user's question.\n\n"
        "## Available Wiki Pages\n\n"
        f"{page_list}\n\n"
        "## Selection Method\n"
        "Based on the user's question, choose up to 5 most relevant page titles "
        f"and request them by number, for example `{repo_name} 1/3`."
    )


def build_navigation_page(pages: Sequence[Page], repo_name: str) -> Page:
    """Wrap the navigation index in a synthetic Page."""
    content = generate_navigation(pages, repo_name)
    return Page(
        heading=f"{repo_name} Wiki Navigation",
        sub_headings=tuple(page.heading for page in pages[:MAX_NAVIGATION_PAGES]),
        summary=f"{len(pages)} wiki pages available",
        content=content,
        size=estimate_token_count(content),
    )


def resolve_pages(pages: Sequence[Page], query: ParsedQuery, settings: DeepwikiSettings,
                  ranker: Optional[FuzzyRanker] = None) -> Resolution:
    """Decide which pages answer a parsed query.

    Explicit page numbers win; with no search text and navigation enabled a
    single navigation page is produced; otherwise pages are ranked against
    the search text and capped at settings.max_mention_items.
    """
    if query.page_numbers:
        return Resolution(pages=select_pages_by_numbers(pages, query.page_numbers))

    if not query.search_query and settings.enable_navigation:
        return Resolution(pages=[build_navigation_page(pages, query.repo_name)], is_navigation=True)

    matched = filter_pages_by_query(pages, query.search_query, ranker)
    return Resolution(pages=matched[:settings.max_mention_items])
