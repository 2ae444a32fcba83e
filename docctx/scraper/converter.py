"""
Article to markdown conversion for web2md.
"""

from typing import Callable, Optional

from ..extraction.tokens import count_tokens
from ..extraction.truncation import truncate_by_tokens
from .content_parser import ContentParser
from .sites import ExtractedContent, SiteHandler, find_site_handler

HEADER_TEMPLATE = (
    "<!--\n"
    "Fetched from: {url}\n"
    "Converted by: docctx web2md\n"
    "Processing: Removed images, scripts, and normalized code blocks\n"
    "-->\n\n"
    "# {title}\n\n"
)


def parser_for(handler: SiteHandler) -> ContentParser:
    """Build a ContentParser configured with a site handler's rules."""
    return ContentParser(
        remove_selectors=handler.remove_selectors,
        callout_classes=handler.callout_classes,
        quote_classes=handler.quote_classes,
        code_frame_classes=handler.code_frame_classes,
    )


def convert_to_markdown(extracted: ExtractedContent, max_tokens: int, url: str,
                        handler: Optional[SiteHandler] = None,
                        counter: Callable[[str], int] = count_tokens) -> str:
    """Render extracted article HTML as markdown under a source header, within max_tokens."""
    handler = handler or find_site_handler(url)
    markdown = parser_for(handler).to_markdown(extracted.content)

    full_content = HEADER_TEMPLATE.format(url=url, title=extracted.title) + markdown
    return truncate_by_tokens(full_content, max_tokens, counter=counter)
