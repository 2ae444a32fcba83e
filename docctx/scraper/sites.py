"""
Site handlers that locate the article body and title on known sites.

Handlers are tried in order; the default handler matches every URL and
must stay last.
"""

import json
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from ..exceptions import ContentNotFoundError
from ..utils.logging import get_logger

logger = get_logger(__name__)

AD_SELECTORS = (
    '.google-auto-placed',
    '.adsbygoogle',
    '[class*="advertisement"]',
    '[id*="ad"]',
)


@dataclass(frozen=True)
class ExtractedContent:
    """Title and body HTML of an article."""
    title: str
    content: str


@dataclass(frozen=True)
class SiteHandler:
    """How to find and clean the article on one family of pages."""
    name: str
    url_pattern: re.Pattern
    extract: Callable[[BeautifulSoup], Optional[ExtractedContent]]
    remove_selectors: Tuple[str, ...] = ()
    callout_classes: Tuple[str, ...] = ()
    quote_classes: Tuple[str, ...] = ()
    code_frame_classes: Tuple[str, ...] = ()

    def matches(self, url: str) -> bool:
        return bool(self.url_pattern.match(url))


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", 'html.parser')


def extract_by_selector(soup: BeautifulSoup, selector: str) -> str:
    """Inner HTML of the first element matching selector, or an empty string."""
    element = soup.select_one(selector)
    if element is None:
        return ""
    return "".join(str(child) for child in element.contents)


def first_by_selectors(soup: BeautifulSoup, selectors: Sequence[str]) -> str:
    """Inner HTML of the first selector with non-blank content."""
    for selector in selectors:
        content = extract_by_selector(soup, selector)
        if content.strip():
            return content
    return ""


def first_text(soup: BeautifulSoup, selectors: Sequence[str]) -> Optional[str]:
    """Stripped text of the first selector with non-blank text."""
    for selector in selectors:
        element = soup.select_one(selector)
        if element is not None and element.get_text().strip():
            return element.get_text().strip()
    return None


def meta_content(soup: BeautifulSoup, selector: str) -> Optional[str]:
    element = soup.select_one(selector)
    if element is not None:
        content = (element.get('content') or "").strip()
        if content:
            return content
    return None


def document_title(soup: BeautifulSoup, suffix: Optional[str] = None) -> Optional[str]:
    """Text of <title>, with a site suffix pattern removed."""
    if soup.title is None:
        return None
    title = soup.title.get_text().strip()
    if suffix:
        title = re.sub(suffix, '', title).strip()
    return title or None


def fallback_title(soup: BeautifulSoup) -> str:
    return document_title(soup) or "Untitled"


# Default

def _default_title(soup: BeautifulSoup) -> Optional[str]:
    return (first_text(soup, ['h1'])
            or meta_content(soup, 'meta[property="og:title"]')
            or meta_content(soup, 'meta[name="title"]'))


def extract_default(soup: BeautifulSoup) -> Optional[ExtractedContent]:
    content = extract_by_selector(soup, 'body')
    if not content.strip():
        return None
    return ExtractedContent(title=_default_title(soup) or fallback_title(soup), content=content)


# Qiita

QIITA_CONTENT_SELECTORS = [
    '.it-MdContent',
    '#personal-public-article-body',
    '.p-article_body',
    '[data-testid="article-body"]',
    'article .markdown-body',
    'article',
    'main',
]

QIITA_TITLE_SELECTORS = [
    'h1.it-ArticleHeader_title',
    '.p-article_title h1',
    'h1[data-testid="article-title"]',
    'h1',
]


def _qiita_title(soup: BeautifulSoup) -> Optional[str]:
    return (first_text(soup, QIITA_TITLE_SELECTORS)
            or meta_content(soup, 'meta[property="og:title"]')
            or document_title(soup, r'\s*-\s*Qiita$'))


def extract_qiita(soup: BeautifulSoup) -> Optional[ExtractedContent]:
    content = first_by_selectors(soup, QIITA_CONTENT_SELECTORS)
    if not content.strip():
        return None
    return ExtractedContent(title=_qiita_title(soup) or fallback_title(soup), content=content)


# Zenn

ZENN_CONTENT_SELECTORS = ['.znc', 'article', 'main']

ZENN_TITLE_SELECTORS = [
    'h1[data-testid="article-title"]',
    '.View_title__VsTaR',
    'article h1',
    'h1',
]


def _zenn_next_data(soup: BeautifulSoup) -> Optional[ExtractedContent]:
    """Article from the embedded Next.js page data, when present and complete."""
    script = soup.select_one('#__NEXT_DATA__')
    if script is None or not script.string:
        return None

    try:
        data = json.loads(script.string)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse __NEXT_DATA__: {e}")
        return None

    article = (((data or {}).get('props') or {}).get('pageProps') or {}).get('article') or {}
    if article.get('bodyHtml') and article.get('title'):
        return ExtractedContent(title=article['title'], content=article['bodyHtml'])
    return None


def _zenn_title(soup: BeautifulSoup) -> Optional[str]:
    return (first_text(soup, ZENN_TITLE_SELECTORS)
            or meta_content(soup, 'meta[property="og:title"]')
            or document_title(soup, r'\s*\|\s*Zenn$'))


def extract_zenn(soup: BeautifulSoup) -> Optional[ExtractedContent]:
    extracted = _zenn_next_data(soup)
    if extracted is not None:
        return extracted

    content = first_by_selectors(soup, ZENN_CONTENT_SELECTORS)
    if not content.strip():
        return None
    return ExtractedContent(title=_zenn_title(soup) or fallback_title(soup), content=content)


QIITA = SiteHandler(
    name="qiita",
    url_pattern=re.compile(r'^https://qiita\.com/[\w-]+/items/[\w-]+'),
    extract=extract_qiita,
    remove_selectors=AD_SELECTORS,
    quote_classes=('type-quote',),
    code_frame_classes=('code-frame',),
)

ZENN = SiteHandler(
    name="zenn",
    url_pattern=re.compile(r'^https://zenn\.dev/[\w-]+/(articles|books)/[\w-]+'),
    extract=extract_zenn,
    remove_selectors=AD_SELECTORS,
    callout_classes=('msg',),
)

DEFAULT = SiteHandler(
    name="default",
    url_pattern=re.compile(r'.*'),
    extract=extract_default,
    remove_selectors=('nav', 'header', 'footer'),
)

SITE_HANDLERS = (QIITA, ZENN, DEFAULT)


def find_site_handler(url: str) -> SiteHandler:
    """First handler whose pattern matches url."""
    for handler in SITE_HANDLERS:
        if handler.matches(url):
            return handler
    return DEFAULT


def extract_content(html: str, url: str) -> Tuple[SiteHandler, ExtractedContent]:
    """Locate the article in a page; raises ContentNotFoundError when there is none."""
    handler = find_site_handler(url)
    extracted = handler.extract(parse_html(html))
    if extracted is None:
        raise ContentNotFoundError("Failed to extract content from the page")

    logger.debug(f"Extracted '{extracted.title}' from {url} with the {handler.name} handler")
    return handler, extracted
