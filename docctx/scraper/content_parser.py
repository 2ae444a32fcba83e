"""
Content parser for converting article HTML into markdown.
"""

import re
from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from typing import Iterable, List, Optional, Union

from ..exceptions import ConversionError
from ..utils.logging import get_logger

# Always dropped, whatever the site
ALWAYS_REMOVE = ['script', 'style', 'noscript', 'img', 'svg', 'iframe', 'picture', 'button', 'form']

HEADINGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']

CONTAINERS = ['div', 'section', 'article', 'main', 'aside', 'figure', 'header', 'footer',
              'nav', 'details', 'summary', 'figcaption', 'center']

BLOCKS = HEADINGS + CONTAINERS + ['p', 'pre', 'ul', 'ol', 'table', 'blockquote', 'hr', 'dl']

LANGUAGE_CLASS = re.compile(r'^(?:language|lang)-(.+)$')

CALLOUT_EMOJI = {
   'alert': '🚨',
   'warning': '⚠️',
   'message': 'ℹ️',
}
DEFAULT_CALLOUT_EMOJI = '💡'


class ContentParser:
   """Parser for converting article HTML into clean markdown."""

   def __init__(self, remove_selectors: Iterable[str] = (),
                callout_classes: Iterable[str] = (),
                quote_classes: Iterable[str] = (),
                code_frame_classes: Iterable[str] = ()):
       """Initialize content parser with site-specific element rules."""
       self.remove_selectors = list(remove_selectors)
       self.callout_classes = set(callout_classes)
       self.quote_classes = set(quote_classes)
       self.code_frame_classes = set(code_frame_classes)
       self.logger = get_logger(__name__)

   def clean_text(self, text: str) -> str:
       """Collapse whitespace runs and trim."""
       if not text:
           return ""

       text = re.sub(r'\s+', ' ', text)
       return text.strip()

   def to_markdown(self, html: Union[str, Tag]) -> str:
       """Convert an HTML fragment (or parsed element) into markdown."""
       try:
           if isinstance(html, Tag):
               root = html
           else:
               root = BeautifulSoup(html or "", 'html.parser')

           self._remove_unwanted(root)
           blocks = self._process_blocks(root)
       except (AttributeError, TypeError, ValueError) as e:
           self.logger.error(f"Error converting HTML to markdown: {e}")
           raise ConversionError(f"Failed to convert HTML to markdown: {e}")

       markdown = "\n\n".join(block for block in blocks if block.strip())
       markdown = re.sub(r'\n{3,}', '\n\n', markdown)
       return markdown.strip()

   def _remove_unwanted(self, root: Tag) -> None:
       """Drop elements that never belong in the output."""
       for element in root.find_all(ALWAYS_REMOVE):
           element.decompose()

       for comment in root.find_all(string=lambda s: isinstance(s, Comment)):
           comment.extract()

       for selector in self.remove_selectors:
           for element in root.select(selector):
               element.decompose()

   def _process_blocks(self, parent: Tag) -> List[str]:
       """Convert the children of parent into markdown blocks."""
       blocks = []
       inline_parts = []

       def flush():
           text = self.clean_text("".join(inline_parts))
           if text:
               blocks.append(text)
           inline_parts.clear()

       for child in parent.children:
           if isinstance(child, Tag) and child.name in BLOCKS:
               flush()
               block = self._process_element(child)
               if block:
                   blocks.append(block)
           else:
               inline_parts.append(self._inline(child))

       flush()
       return blocks

   def _process_element(self, element: Tag) -> str:
       """Process individual block element."""
       if element.name in HEADINGS:
           return self._process_heading(element)
       elif element.name == 'p':
           return self._process_paragraph(element)
       elif element.name == 'pre':
           return self._process_code_block(element)
       elif element.name in ['ul', 'ol']:
           return self._process_list(element)
       elif element.name == 'table':
           return self._process_table(element)
       elif element.name == 'blockquote':
           return self._quote("\n\n".join(self._process_blocks(element)))
       elif element.name == 'hr':
           return "---"
       elif element.name == 'dl':
           return self._process_definitions(element)
       else:
           return self._process_div(element)

   def _process_heading(self, element: Tag) -> str:
       """Process heading element; links inside headings are flattened to text."""
       level = int(element.name[1])
       text = self.clean_text(element.get_text())
       return f"{'#' * level} {text}" if text else ""

   def _process_paragraph(self, element: Tag) -> str:
       """Process paragraph element."""
       return self.clean_text(self._inline(element))

   def _process_code_block(self, element: Tag, language: Optional[str] = None) -> str:
       """Process code block element."""
       code_tag = element.find('code')
       source = code_tag if code_tag is not None else element
       code = source.get_text().strip('\n')

       if not code.strip():
           return ""

       if language is None:
           language = self._code_language(source) or self._code_language(element) or ""

       return f"```{language}\n{code}\n```"

   def _code_language(self, element: Tag) -> Optional[str]:
       """Read a language hint from class names or data-lang."""
       for cls in element.get('class', []):
           match = LANGUAGE_CLASS.match(cls)
           if match:
               return match.group(1)
       return element.get('data-lang')

   def _process_list(self, element: Tag, depth: int = 0) -> str:
       """Process list element, recursing into nested lists."""
       ordered = element.name == 'ol'
       try:
           start = int(element.get('start', 1))
       except ValueError:
           start = 1

       indent = "  " * depth
       items = []
       for index, li in enumerate(element.find_all('li', recursive=False)):
           text_parts = []
           nested = []
           for child in li.children:
               if isinstance(child, Tag) and child.name in ['ul', 'ol']:
                   nested.append(self._process_list(child, depth + 1))
               elif isinstance(child, Tag) and child.name == 'pre':
                   code = self._process_code_block(child)
                   nested.append("\n".join(f"{indent}  {line}" for line in code.split("\n")))
               else:
                   text_parts.append(self._inline(child))

           text = self.clean_text("".join(text_parts))
           marker = f"{start + index}." if ordered else "-"
           lines = [f"{indent}{marker} {text}".rstrip()]
           lines.extend(block for block in nested if block)
           items.append("\n".join(lines))

       return "\n".join(items) if items else ""

   def _process_div(self, element: Tag) -> str:
       """Process container element (callouts, code frames and plain wrappers)."""
       classes = set(element.get('class', []))

       if classes & self.code_frame_classes:
           pre = element.find('pre')
           if pre is None:
               return ""
           filename = element.select_one('.code-frame-filename, .code-block-filename-container')
           language = self.clean_text(filename.get_text()) if filename else element.get('data-lang')
           if filename:
               filename.decompose()
           return self._process_code_block(pre, language=language)

       if classes & self.callout_classes:
           emoji = DEFAULT_CALLOUT_EMOJI
           for cls in classes:
               if cls in CALLOUT_EMOJI:
                   emoji = CALLOUT_EMOJI[cls]
                   break
           body = "\n\n".join(self._process_blocks(element))
           return self._quote(f"{emoji} {body}") if body else ""

       if classes & self.quote_classes:
           return self._quote("\n\n".join(self._process_blocks(element)))

       return "\n\n".join(self._process_blocks(element))

   def _process_table(self, element: Tag) -> str:
       """Process table element into a pipe table."""
       rows = []
       for row in element.find_all('tr'):
           cells = row.find_all(['th', 'td'])
           if cells:
               rows.append([self.clean_text(self._inline(cell)).replace('|', '\\|') for cell in cells])

       if not rows:
           return ""

       width = max(len(row) for row in rows)
       rows = [row + [""] * (width - len(row)) for row in rows]

       lines = ["| " + " | ".join(rows[0]) + " |",
                "| " + " | ".join(["---"] * width) + " |"]
       lines.extend("| " + " | ".join(row) + " |" for row in rows[1:])
       return "\n".join(lines)

   def _process_definitions(self, element: Tag) -> str:
       """Process definition list as bold terms followed by their descriptions."""
       lines = []
       for child in element.find_all(['dt', 'dd'], recursive=False):
           text = self.clean_text(self._inline(child))
           if not text:
               continue
           lines.append(f"**{text}**" if child.name == 'dt' else f": {text}")
       return "\n".join(lines)

   def _quote(self, text: str) -> str:
       if not text.strip():
           return ""
       return "\n".join(f"> {line}" if line else ">" for line in text.split("\n"))

   def _inline(self, node) -> str:
       """Convert inline content to markdown text."""
       if isinstance(node, Comment):
           return ""
       if isinstance(node, NavigableString):
           return re.sub(r'\s+', ' ', str(node))
       if not isinstance(node, Tag):
           return ""

       if node.name == 'br':
           return "\n"
       if node.name == 'code':
           text = node.get_text()
           return f"`{text}`" if text.strip() else ""

       inner = "".join(self._inline(child) for child in node.children)
       stripped = inner.strip()

       if node.name == 'a':
           href = node.get('href')
           if not stripped:
               return ""
           if href and not href.startswith('#') and not href.startswith('javascript:'):
               return f"[{stripped}]({href})"
           return inner
       if node.name in ['strong', 'b']:
           return f"**{stripped}**" if stripped else ""
       if node.name in ['em', 'i']:
           return f"*{stripped}*" if stripped else ""
       if node.name in ['del', 's']:
           return f"~~{stripped}~~" if stripped else ""
       if node.name in BLOCKS:
           return f" {inner} "

       return inner
