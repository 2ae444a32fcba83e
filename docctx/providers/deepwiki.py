"""
deepwiki provider: wiki pages and chat sessions from deepwiki.com.
"""

import re
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

from ..config.settings import Config, DeepwikiSettings
from ..exceptions import DocCtxError, InvalidQueryError, UpstreamError, UpstreamTimeoutError
from ..extraction.chat import clean_title, format_chat_history
from ..extraction.extractor import extract_pages
from ..extraction.models import ChatQuery, ExtractionStats, Page, ParsedQuery
from ..extraction.truncation import apply_size_limit
from ..retrieval.ranker import FuzzyRanker
from ..retrieval.resolver import resolve_pages
from ..scraper.fetcher import PageFetcher
from ..storage.cache import ResponseCache
from ..utils.debounce import Debouncer
from ..utils.helpers import format_number
from .base import ContextProvider, Item, Mention, ProviderMeta, create_error_mention

PAGE_NUMBERS = re.compile(r'^\d+(/\d+)*$')

DEEPWIKI_HOST = "deepwiki.com"
GITHUB_HOST = "github.com"


def parse_page_numbers(text: str) -> Optional[List[int]]:
    """Parse "1/4/9" into [1, 4, 9]; None unless every number is positive."""
    if not PAGE_NUMBERS.match(text):
        return None
    numbers = [int(part) for part in text.split('/')]
    if any(number < 1 for number in numbers):
        return None
    return numbers


def _parse_chat_url(url: str) -> ChatQuery:
    parsed = urlparse(url)
    segments = [segment for segment in parsed.path.split('/') if segment]

    if parsed.hostname != DEEPWIKI_HOST:
        raise InvalidQueryError("URL must be from https://deepwiki.com")
    if not segments or segments[0] != "search":
        raise InvalidQueryError("DeepWiki URL must contain /search/{sessionId}")
    if len(segments) < 2 or not segments[1].strip():
        raise InvalidQueryError("Session ID cannot be empty")

    return ChatQuery(session_id=segments[1])


def _repo_from_github_url(url: str) -> str:
    parsed = urlparse(url)
    if parsed.hostname != GITHUB_HOST:
        raise InvalidQueryError("URL must be from https://github.com")

    parts = parsed.path[1:].split('/')
    if len(parts) < 2:
        raise InvalidQueryError("GitHub URL must contain user and repository name")

    user, repo = parts[0], parts[1]
    if not user or not repo:
        raise InvalidQueryError("User name and repository name cannot be empty")
    return f"{user}/{repo}"


def _is_chat_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.hostname == DEEPWIKI_HOST or parsed.path.startswith("/search/")


def parse_input_query(query: str) -> Union[ParsedQuery, ChatQuery]:
    """Interpret user input as a repository query or a chat session reference.

    Accepts ``user/repo``, a GitHub repository URL or a deepwiki
    ``/search/<id>`` URL, optionally followed by a page-number list such as
    ``1/4/9`` or free search text.

    Raises InvalidQueryError describing the first problem found.
    """
    trimmed = (query or "").strip()
    if not trimmed:
        raise InvalidQueryError("Repository name is required")

    parts = trimmed.split()
    first = parts[0]
    rest = " ".join(parts[1:])

    if first.startswith("http"):
        if _is_chat_url(first):
            return _parse_chat_url(first)
        repo_name = _repo_from_github_url(first)
    else:
        repo_name = first

    repo_parts = repo_name.split('/')
    if len(repo_parts) != 2:
        raise InvalidQueryError('Repository name must be in "user/repo" format')

    user, repo = repo_parts
    if not user.strip() or not repo.strip():
        raise InvalidQueryError("User name and repository name cannot be empty")

    if not rest:
        return ParsedQuery(repo_name=repo_name)

    page_numbers = parse_page_numbers(rest)
    if page_numbers is not None:
        return ParsedQuery(repo_name=repo_name, page_numbers=page_numbers)
    return ParsedQuery(repo_name=repo_name, search_query=rest)


def build_deepwiki_url(repo_name: str, base_url: str = "https://deepwiki.com") -> str:
    """Wiki URL for a repository; the name is used as-is, without a github.com prefix."""
    return f"{base_url.rstrip('/')}/{repo_name}"


def page_to_mention(page: Page, repo_name: str, max_tokens: int,
                    base_url: str = "https://deepwiki.com") -> Mention:
    """Build the mention for one wiki page, its content limited to max_tokens."""
    size = format_number(page.size)
    return Mention(
        title=f"{page.heading} [{size}]",
        uri=f"{build_deepwiki_url(repo_name, base_url)}#{page.heading}",
        description=f"{page.summary} ({size} tokens)",
        data={
            "content": apply_size_limit(page.content, max_tokens),
            "is_navigation": False,
        },
    )


class DeepwikiProvider(ContextProvider):
    """Serves deepwiki.com wiki pages and chat histories as mentions."""

    def __init__(self, config: Optional[Config] = None,
                 cache: Optional[ResponseCache] = None,
                 ranker: Optional[FuzzyRanker] = None):
        """Initialize provider with configuration, HTML cache and ranker."""
        super().__init__(config)
        self.cache = cache or ResponseCache.from_config(self.config)
        self.fetcher = PageFetcher(self.config, self.cache)
        self.ranker = ranker or FuzzyRanker()
        self._debouncer = Debouncer(self._fetch_async, DeepwikiSettings.debounce_delay / 1000)

    def meta(self) -> ProviderMeta:
        return ProviderMeta(
            name="deepwiki",
            mention_label="type <user/repo or githubUrl> [page search query or page number]",
        )

    def fetch_html(self, repo_name: str) -> str:
        """Fetch the wiki HTML for a repository.

        deepwiki answers 200 even for unknown repositories, so the status
        is not checked; missing wikis show up as pages that fail to extract.
        """
        url = build_deepwiki_url(repo_name, self.config.deepwiki_base_url)
        try:
            return self.fetcher.fetch_text(url, timeout=self.config.deepwiki_timeout,
                                           check_status=False)
        except UpstreamTimeoutError:
            raise UpstreamTimeoutError("Connection to deepwiki.com timed out")

    def fetch_chat_history(self, session_id: str) -> Dict[str, Any]:
        """Fetch and validate a chat session from the DeepWiki API."""
        url = f"{self.config.deepwiki_chat_api_url.rstrip('/')}/{session_id}"
        try:
            data = self.fetcher.fetch_json(url, timeout=self.config.deepwiki_timeout,
                                           headers={'Content-Type': 'application/json'})
        except UpstreamTimeoutError:
            raise UpstreamTimeoutError("Connection to DeepWiki API timed out")
        except UpstreamError as e:
            if e.status_code == 404:
                raise UpstreamError("Chat session not found", status_code=404)
            if e.status_code is not None:
                raise UpstreamError(f"Failed to fetch chat history: {e.status_code}",
                                    status_code=e.status_code)
            raise

        if not isinstance(data, dict):
            raise UpstreamError("Invalid chat history data format")
        if "title" not in data or not isinstance(data.get("queries"), list):
            raise UpstreamError("Missing required fields in chat history")
        return data

    async def _fetch_async(self, repo_name: str) -> str:
        return await self.run_blocking(self.fetch_html, repo_name)

    async def mentions(self, query: str, settings: Optional[Dict[str, Any]] = None) -> List[Mention]:
        """Resolve a deepwiki query into page, navigation, chat or error mentions."""
        if not query or not query.strip():
            return []

        validated = DeepwikiSettings.from_dict(settings)

        try:
            parsed = parse_input_query(query)
            if isinstance(parsed, ChatQuery):
                return await self._chat_mentions(parsed, validated)

            self._debouncer.delay = validated.debounce_delay / 1000
            html = await self._debouncer(parsed.repo_name)
            if html is None:
                return []

            return self._page_mentions(html, parsed, validated)
        except DocCtxError as e:
            self.logger.warning(f"deepwiki query '{query}' failed: {e}")
            return create_error_mention(str(e), str(e))

    async def _chat_mentions(self, chat: ChatQuery, settings: DeepwikiSettings) -> List[Mention]:
        data = await self.run_blocking(self.fetch_chat_history, chat.session_id)
        content = apply_size_limit(format_chat_history(data), settings.max_tokens)
        title = clean_title(str(data.get("title") or "")) or "DeepWiki Chat"
        count = sum(1 for query in data.get("queries") or [] if isinstance(query, dict))

        return [
            Mention(
                title=title,
                uri=f"{self.config.deepwiki_base_url.rstrip('/')}/search/{chat.session_id}",
                description=f"DeepWiki chat history ({count} queries)",
                data={"content": content, "is_navigation": False, "is_chat": True},
            )
        ]

    def _page_mentions(self, html: str, parsed: ParsedQuery,
                       settings: DeepwikiSettings) -> List[Mention]:
        stats = ExtractionStats()
        pages = extract_pages(html, stats=stats)
        self.logger.info(
            f"Extracted {len(pages)} pages for {parsed.repo_name} "
            f"({stats.chunks_found} chunks, {stats.pages_dropped} dropped)")

        if not pages:
            return create_error_mention(
                "Repository not found",
                "The specified repository wiki pages do not exist or are not supported by deepwiki.com.",
            )

        resolution = resolve_pages(pages, parsed, settings, self.ranker)

        if resolution.is_navigation:
            navigation = resolution.pages[0]
            return [
                Mention(
                    title=navigation.heading,
                    uri=f"{build_deepwiki_url(parsed.repo_name, self.config.deepwiki_base_url)}#navigation",
                    description=navigation.summary,
                    data={"content": navigation.content, "is_navigation": True},
                )
            ]

        return [page_to_mention(page, parsed.repo_name, settings.max_tokens,
                                self.config.deepwiki_base_url)
                for page in resolution.pages]

    async def items(self, mention: Mention, settings: Optional[Dict[str, Any]] = None) -> List[Item]:
        """Turn a deepwiki mention into a content item."""
        content = (mention.data or {}).get("content")
        if not content:
            return []

        if mention.is_error:
            return [Item(title=mention.title or "Error", content=content,
                         hover="Error occurred while processing request")]

        if mention.data.get("is_navigation"):
            return [Item(title=mention.title or "Wiki Navigation", content=content,
                         url=mention.uri, hover="AI-assisted wiki page selection")]

        return [Item(title=mention.title or "Wiki Page", content=content,
                     url=mention.uri, hover=f"Wiki page from {mention.uri}")]
