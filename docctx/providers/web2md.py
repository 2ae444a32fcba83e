"""
web2md provider: converts web articles to markdown.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..config.settings import Config, Web2MdSettings
from ..exceptions import (
    ContentNotFoundError,
    ConversionError,
    DocCtxError,
    UpstreamTimeoutError,
)
from ..scraper.converter import convert_to_markdown
from ..scraper.fetcher import PageFetcher
from ..scraper.sites import ExtractedContent, extract_content
from ..storage.cache import ResponseCache
from ..utils.debounce import Debouncer
from ..utils.helpers import is_http_url, sanitize_filename
from .base import ContextProvider, Item, Mention, ProviderMeta


class ErrorType(Enum):
    """Failure categories reported on error mentions."""
    INVALID_URL = "INVALID_URL"
    NETWORK_ERROR = "NETWORK_ERROR"
    CONTENT_NOT_FOUND = "CONTENT_NOT_FOUND"
    CONVERSION_ERROR = "CONVERSION_ERROR"


def error_type_for(error: DocCtxError) -> ErrorType:
    """Map a provider error onto the category shown to the user."""
    if isinstance(error, ContentNotFoundError):
        return ErrorType.CONTENT_NOT_FOUND
    if isinstance(error, ConversionError):
        return ErrorType.CONVERSION_ERROR
    return ErrorType.NETWORK_ERROR


def output_path(url: str, directory: Path) -> Path:
    """File path for a URL's markdown inside directory."""
    return Path(directory) / f"{sanitize_filename(url)}.md"


class Web2MdProvider(ContextProvider):
    """Fetches a web article and serves it as markdown."""

    def __init__(self, config: Optional[Config] = None, cache: Optional[ResponseCache] = None):
        """Initialize provider with configuration and HTML cache."""
        super().__init__(config)
        self.cache = cache or ResponseCache.from_config(self.config)
        self.fetcher = PageFetcher(self.config, self.cache)
        self._debouncer = Debouncer(self._convert_async, Web2MdSettings.debounce_delay / 1000)

    def meta(self) -> ProviderMeta:
        return ProviderMeta(name="Web2Md", mention_label="Convert web article to Markdown")

    def fetch_page(self, url: str, settings: Web2MdSettings) -> str:
        """Fetch page HTML with the configured User-Agent and timeout."""
        try:
            return self.fetcher.fetch_text(url, timeout=settings.request_timeout / 1000,
                                           headers={'User-Agent': settings.user_agent})
        except UpstreamTimeoutError:
            raise UpstreamTimeoutError(f"Request timeout after {settings.request_timeout}ms")

    def convert(self, url: str, settings: Web2MdSettings) -> Tuple[ExtractedContent, str]:
        """Fetch url and return its extracted article with the markdown rendering."""
        html = self.fetch_page(url, settings)
        handler, extracted = extract_content(html, url)
        markdown = convert_to_markdown(extracted, settings.max_tokens, url, handler)
        self.logger.info(f"Converted {url} ({len(markdown)} characters)")
        return extracted, markdown

    def save_markdown(self, url: str, markdown: str, directory: Path) -> Path:
        """Write markdown for url into directory and return the file path."""
        path = output_path(url, directory)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown, encoding='utf-8')
        self.logger.info(f"Saved markdown to {path}")
        return path

    async def _convert_async(self, url: str, settings: Web2MdSettings):
        return await self.run_blocking(self.convert, url, settings)

    async def mentions(self, query: str, settings: Optional[Dict[str, Any]] = None) -> List[Mention]:
        """Convert the article at a URL query into a single mention."""
        url = (query or "").strip()
        if not url or not is_http_url(url):
            return []

        validated = Web2MdSettings.from_dict(settings)

        try:
            self._debouncer.delay = validated.debounce_delay / 1000
            result = await self._debouncer(url, validated)
            if result is None:
                return []
            extracted, markdown = result
        except DocCtxError as e:
            self.logger.warning(f"web2md conversion of {url} failed: {e}")
            return [Mention(title="Error", uri=url, description=str(e),
                            data={"error_type": error_type_for(e).value, "is_error": True})]

        if validated.save_local:
            try:
                self.save_markdown(url, markdown, Path(validated.save_directory))
            except OSError as e:
                self.logger.error(f"Failed to save markdown for {url}: {e}")

        return [
            Mention(
                title=extracted.title,
                uri=url,
                description=f"Web article converted to Markdown ({round(len(markdown) / 1000)}KB)",
                data={"markdown": markdown},
            )
        ]

    async def items(self, mention: Mention, settings: Optional[Dict[str, Any]] = None) -> List[Item]:
        """Deliver the markdown carried by a mention."""
        markdown = (mention.data or {}).get("markdown")
        if not markdown:
            return []
        return [Item(title=mention.title, content=markdown, url=mention.uri)]
