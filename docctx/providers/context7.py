"""
context7 provider: library search and documentation from context7.com.
"""

import json
from typing import Any, Dict, List, Optional

from ..config.settings import Config, Context7Settings
from ..exceptions import DocCtxError
from ..retrieval.ranker import FuzzyRanker
from ..scraper.fetcher import PageFetcher
from ..storage.cache import ResponseCache
from .base import ContextProvider, Item, Mention, ProviderMeta

SEARCH_FIELDS = ["title", "id", "description"]

EMPTY_DOCUMENTATION = ("No content available", "No context data available")

SOURCE_HEADER = {"X-Context7-Source": "mcp-server"}


def split_query(query: str):
    """Split "<library> [topic words]" into a lowercase library query and topic."""
    words = query.strip().lower().split()
    if not words:
        return "", None
    return words[0], " ".join(words[1:]) or None


def process_json_response(json_text: str) -> str:
    """Compact a JSON documentation payload to the fields an assistant needs.

    Returns the input unchanged when it cannot be processed.
    """
    try:
        data = json.loads(json_text)
        formatted = [
            {
                "id": entry.get("codeId"),
                "title": entry.get("codeTitle"),
                "description": entry.get("codeDescription"),
                "lang": entry.get("codeLanguage"),
                "page": entry.get("pageTitle"),
                "codes": [code.get("code") for code in entry.get("codeList") or []],
            }
            for entry in data
        ]
    except (ValueError, TypeError, AttributeError):
        return json_text
    return json.dumps(formatted, ensure_ascii=False)


def order_by_trust(results: List[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
    """Highest trustScore first; missing scores sort last."""
    return sorted(results, key=lambda r: r.get("trustScore") or 0, reverse=True)[:limit]


class Context7Provider(ContextProvider):
    """Searches context7 libraries and serves their documentation."""

    def __init__(self, config: Optional[Config] = None,
                 search_cache: Optional[ResponseCache] = None,
                 ranker: Optional[FuzzyRanker] = None):
        """Initialize provider with configuration, search cache and ranker."""
        super().__init__(config)
        self.search_cache = search_cache or ResponseCache.from_config(
            self.config, ttl=self.config.search_cache_ttl)
        self.fetcher = PageFetcher(self.config)
        self.ranker = ranker or FuzzyRanker()

    def meta(self) -> ProviderMeta:
        return ProviderMeta(name="Context7",
                            mention_label="type `<search library query> [topic keyword]`")

    def _search(self, query: str) -> Optional[Dict[str, Any]]:
        url = f"{self.config.context7_api_url}/v1/search"
        try:
            return self.fetcher.fetch_json(url, params={"query": query})
        except DocCtxError as e:
            self.logger.error(f"Failed to search libraries for '{query}': {e}")
            return None

    async def search_libraries(self, query: str) -> Optional[Dict[str, Any]]:
        """Search libraries, reusing results for the same query within the cache TTL."""
        return await self.search_cache.get_or_fill(
            query, lambda: self.run_blocking(self._search, query))

    def fetch_library_documentation(self, library_id: str, tokens: int,
                                    topic: Optional[str] = None,
                                    doc_format: str = "txt") -> Optional[str]:
        """Fetch documentation text for a library, or None when there is none."""
        library_id = library_id.lstrip('/')
        params = {"tokens": str(tokens), "type": doc_format}
        if topic:
            params["topic"] = topic

        try:
            text = self.fetcher.fetch_text(f"{self.config.context7_api_url}/v1/{library_id}",
                                           headers=SOURCE_HEADER, params=params)
        except DocCtxError as e:
            self.logger.error(f"Failed to fetch documentation for {library_id}: {e}")
            return None

        if not text or text.strip() in EMPTY_DOCUMENTATION:
            return None

        if doc_format == "json":
            return process_json_response(text)
        return text

    async def mentions(self, query: str, settings: Optional[Dict[str, Any]] = None) -> List[Mention]:
        """Rank libraries matching the first query word; the rest is kept as a topic."""
        if not query or not query.strip():
            return []

        validated = Context7Settings.from_dict(settings)
        library_query, topic = split_query(query)

        response = await self.search_libraries(library_query)
        results = (response or {}).get("results") or []
        if not results:
            return []

        ranked = self.ranker.rank(library_query, results, SEARCH_FIELDS, limit=validated.mention_limit)
        libraries = [result.item for result in ranked]

        if not libraries:
            self.logger.debug(f"No fuzzy match for '{library_query}', ordering by trust score")
            libraries = order_by_trust(results, validated.mention_limit)

        return [
            Mention(
                title=library.get("title", library.get("id", "")),
                uri=f"{self.config.context7_base_url}/{library.get('id', '').lstrip('/')}",
                description=f"{library.get('description') or ''} [{library.get('totalTokens')}]",
                data={"id": library.get("id"), "topic": topic},
            )
            for library in libraries
        ]

    async def items(self, mention: Mention, settings: Optional[Dict[str, Any]] = None) -> List[Item]:
        """Fetch documentation for a library mention."""
        library_id = (mention.data or {}).get("id")
        if not library_id:
            return []

        validated = Context7Settings.from_dict(settings)
        topic = mention.data.get("topic")

        content = await self.run_blocking(self.fetch_library_documentation,
                                          library_id, validated.tokens, topic)
        if not content:
            return []

        path = library_id.lstrip('/')
        url = f"{self.config.context7_base_url}/{path}/llms.txt?tokens={validated.tokens}"
        if topic:
            url += f"&topic={topic}"

        return [
            Item(
                title=f"context7 docs for repository: {library_id} / topic: {topic}",
                content=content,
                url=url,
                hover=f"{library_id}#{topic}",
            )
        ]
