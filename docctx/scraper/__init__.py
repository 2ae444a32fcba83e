"""
Fetching and HTML to markdown conversion for docctx.
"""

from .fetcher import PageFetcher
from .content_parser import ContentParser
from .converter import convert_to_markdown
from .sites import ExtractedContent, SiteHandler, SITE_HANDLERS, extract_content, find_site_handler

__all__ = [
    "PageFetcher",
    "ContentParser",
    "convert_to_markdown",
    "ExtractedContent",
    "SiteHandler",
    "SITE_HANDLERS",
    "extract_content",
    "find_site_handler",
]
