"""
Tests for HTML conversion, site handlers and the web2md provider.
"""

import asyncio
import logging

import pytest
import requests
from unittest.mock import Mock, patch

from docctx.config.settings import Config
from docctx.exceptions import ContentNotFoundError, ConversionError, UpstreamError
from docctx.extraction.truncation import TRUNCATION_MARKER
from docctx.providers.base import Mention
from docctx.providers.web2md import ErrorType, Web2MdProvider, error_type_for, output_path
from docctx.scraper.content_parser import ContentParser
from docctx.scraper.converter import convert_to_markdown
from docctx.scraper.sites import ExtractedContent, extract_content, find_site_handler, parse_html
from docctx.utils.logging import LogCapture

ARTICLE_HTML = """
<html>
<head><title>Article | Example</title></head>
<body>
  <nav><a href="/">Home</a></nav>
  <h1>Article</h1>
  <p>First <strong>paragraph</strong>.</p>
  <script>track()</script>
  <footer>Copyright</footer>
</body>
</html>
"""

FAST = {"debounce_delay": 100}


def html_response(text, status_code=200):
   response = Mock()
   response.status_code = status_code
   response.text = text
   return response


class TestContentParser:
   """Test cases for HTML to markdown conversion."""

   def setup_method(self):
      """Setup test fixtures."""
      self.parser = ContentParser()

   def test_clean_text(self):
      """Test whitespace normalization."""
      assert self.parser.clean_text("Hello    world\n ") == "Hello world"
      assert self.parser.clean_text("") == ""
      assert self.parser.clean_text(None) == ""

   def test_blocks(self):
      """Test headings, inline code, fenced code and nested lists."""
      html = (
         "<h2><a href='#install'>Install</a></h2>"
         "<p>Run <code>pip install x</code> now.</p>"
         "<pre><code class='language-python'>print('hi')\n</code></pre>"
         "<ul><li>One</li><li>Two<ul><li>Nested</li></ul></li></ul>"
      )

      assert self.parser.to_markdown(html) == (
         "## Install\n\n"
         "Run `pip install x` now.\n\n"
         "```python\nprint('hi')\n```\n\n"
         "- One\n- Two\n  - Nested"
      )

   def test_ordered_list(self):
      """Test ordered lists are numbered."""
      html = "<ol><li>First</li><li>Second</li></ol>"
      assert self.parser.to_markdown(html) == "1. First\n2. Second"

   def test_inline_formatting(self):
      """Test links and emphasis."""
      html = "<p>See <a href='https://x.dev/docs'>the docs</a>, <strong>bold</strong> and <em>it</em>.</p>"
      assert self.parser.to_markdown(html) == "See [the docs](https://x.dev/docs), **bold** and *it*."

   def test_table(self):
      """Test tables become pipe tables."""
      html = "<table><tr><th>Name</th><th>Value</th></tr><tr><td>a|b</td><td>1</td></tr></table>"
      assert self.parser.to_markdown(html) == (
         "| Name | Value |\n| --- | --- |\n| a\\|b | 1 |")

   def test_blockquote_and_rule(self):
      """Test block quotes and horizontal rules."""
      html = "<blockquote><p>Quoted</p></blockquote><hr><p>After</p>"
      assert self.parser.to_markdown(html) == "> Quoted\n\n---\n\nAfter"

   def test_images_and_scripts_removed(self):
      """Test non-text elements are dropped."""
      html = "<p>Hi<img src='a.png'></p><script>alert(1)</script><style>p{}</style><!-- note -->"
      assert self.parser.to_markdown(html) == "Hi"

   def test_remove_selectors(self):
      """Test site-specific removal selectors."""
      parser = ContentParser(remove_selectors=['.adsbygoogle'])
      html = "<p>Keep</p><div class='adsbygoogle'>Buy now</div>"

      assert parser.to_markdown(html) == "Keep"

   def test_callouts(self):
      """Test callout boxes render as quotes with an emoji."""
      parser = ContentParser(callout_classes=['msg'])

      assert parser.to_markdown("<div class='msg alert'><p>Careful</p></div>") == "> 🚨 Careful"
      assert parser.to_markdown("<div class='msg'><p>Tip</p></div>") == "> 💡 Tip"

   def test_code_frames(self):
      """Test code frames prefer the file name over the language."""
      parser = ContentParser(code_frame_classes=['code-frame'])
      html = (
         "<div class='code-frame' data-lang='python'>"
         "<div class='code-frame-filename'><span>app.py</span></div>"
         "<div class='highlight'><pre><code>x = 1</code></pre></div>"
         "</div>"
      )

      assert parser.to_markdown(html) == "```app.py\nx = 1\n```"

   def test_code_frame_language(self):
      """Test code frames without a file name use data-lang."""
      parser = ContentParser(code_frame_classes=['code-frame'])
      html = "<div class='code-frame' data-lang='ruby'><pre><code>puts 1</code></pre></div>"

      assert parser.to_markdown(html) == "```ruby\nputs 1\n```"

   def test_empty(self):
      """Test empty input."""
      assert self.parser.to_markdown("") == ""


class TestSiteHandlers:
   """Test cases for site handler selection and extraction."""

   def test_find_handler(self):
      """Test URL patterns pick the right handler."""
      assert find_site_handler("https://qiita.com/alice/items/abc123").name == "qiita"
      assert find_site_handler("https://zenn.dev/bob/articles/intro-to-x").name == "zenn"
      assert find_site_handler("https://zenn.dev/bob/books/guide").name == "zenn"
      assert find_site_handler("https://zenn.dev/bob").name == "default"
      assert find_site_handler("https://example.com/post").name == "default"

   def test_default_title_order(self):
      """Test h1 wins over og:title which wins over <title>."""
      head = ('<head><title>Doc Title</title>'
              '<meta property="og:title" content="OG Title"></head>')

      _, with_h1 = extract_content(f"<html>{head}<body><h1>H1 Title</h1><p>x</p></body></html>",
                                   "https://example.com")
      _, with_og = extract_content(f"<html>{head}<body><p>x</p></body></html>",
                                   "https://example.com")
      _, untitled = extract_content("<html><body><p>x</p></body></html>", "https://example.com")

      assert with_h1.title == "H1 Title"
      assert with_og.title == "OG Title"
      assert untitled.title == "Untitled"

   def test_default_fallback_to_document_title(self):
      """Test <title> is used when no heading or meta title exists."""
      _, extracted = extract_content(
         "<html><head><title>Doc Title</title></head><body><p>x</p></body></html>",
         "https://example.com")

      assert extracted.title == "Doc Title"

   def test_no_content(self):
      """Test pages without a body raise ContentNotFoundError."""
      with pytest.raises(ContentNotFoundError):
         extract_content("<html><body>   </body></html>", "https://example.com")

   def test_qiita(self):
      """Test Qiita article body and title suffix handling."""
      html = ("<html><head><title>Great Tips - Qiita</title></head><body>"
              "<div class='sidebar'>Menu</div>"
              "<div class='it-MdContent'><h2>Tip</h2><p>Body</p></div>"
              "</body></html>")

      handler, extracted = extract_content(html, "https://qiita.com/alice/items/abc123")

      assert handler.name == "qiita"
      assert extracted.title == "Great Tips"
      assert "Menu" not in extracted.content
      assert "<h2>Tip</h2>" in extracted.content

   def test_zenn_next_data(self):
      """Test Zenn pages prefer the embedded article payload."""
      html = ('<html><head><title>Post | Zenn</title></head><body>'
              '<script id="__NEXT_DATA__" type="application/json">'
              '{"props":{"pageProps":{"article":{"title":"Payload Title",'
              '"bodyHtml":"<h2>Intro</h2><p>From payload</p>"}}}}'
              '</script>'
              '<div class="znc"><p>From DOM</p></div>'
              '</body></html>')

      _, extracted = extract_content(html, "https://zenn.dev/bob/articles/intro")

      assert extracted == ExtractedContent(title="Payload Title",
                                           content="<h2>Intro</h2><p>From payload</p>")

   def test_zenn_dom_fallback(self):
      """Test Zenn extraction falls back to the DOM without a payload."""
      html = ('<html><head><title>Post | Zenn</title></head><body>'
              '<script id="__NEXT_DATA__">not json</script>'
              '<div class="znc"><p>From DOM</p></div>'
              '</body></html>')

      _, extracted = extract_content(html, "https://zenn.dev/bob/articles/intro")

      assert extracted.title == "Post"
      assert extracted.content == "<p>From DOM</p>"

   def test_parse_html(self):
      """Test HTML parsing helper."""
      assert parse_html("<p>x</p>").p.get_text() == "x"


class TestConvertToMarkdown:
   """Test cases for article conversion."""

   def test_header_and_body(self):
      """Test output starts with the source comment and title."""
      extracted = ExtractedContent(title="Title", content="<p>Hello</p>")

      markdown = convert_to_markdown(extracted, 6000, "https://example.com/a")

      assert markdown.startswith("<!--\nFetched from: https://example.com/a\n")
      assert markdown.endswith("-->\n\n# Title\n\nHello")

   def test_truncation(self):
      """Test long articles are cut to the token budget."""
      body = "".join(f"<p>paragraph {i} with several words</p>" for i in range(200))
      extracted = ExtractedContent(title="Long", content=body)

      markdown = convert_to_markdown(extracted, 100, "https://example.com/long",
                                     counter=lambda text: len(text.split()))

      assert markdown.endswith(TRUNCATION_MARKER)
      assert len(markdown.split()) <= 110

   def test_default_handler_removes_chrome(self):
      """Test navigation, header and footer are dropped for generic sites."""
      _, extracted = extract_content(ARTICLE_HTML, "https://example.com/post")

      markdown = convert_to_markdown(extracted, 6000, "https://example.com/post")

      assert "Home" not in markdown
      assert "Copyright" not in markdown
      assert "track()" not in markdown
      assert "First **paragraph**." in markdown


class TestWeb2MdProvider:
   """Test cases for Web2MdProvider."""

   def setup_method(self):
      """Setup test fixtures."""
      self.provider = Web2MdProvider(Config())

   def mentions(self, query, settings=None):
      values = dict(FAST)
      values.update(settings or {})
      return asyncio.run(self.provider.mentions(query, values))

   def test_error_type_for(self):
      """Test provider errors map onto their user-facing categories."""
      assert error_type_for(ContentNotFoundError("empty")) is ErrorType.CONTENT_NOT_FOUND
      assert error_type_for(ConversionError("bad")) is ErrorType.CONVERSION_ERROR
      assert error_type_for(UpstreamError("down", status_code=500)) is ErrorType.NETWORK_ERROR

   @patch('requests.get')
   def test_invalid_url_ignored(self, mock_get):
      """Test non-URL queries yield nothing and fetch nothing."""
      assert self.mentions("ftp://example.com/file") == []
      assert self.mentions("just words") == []
      mock_get.assert_not_called()

   @patch('requests.get')
   def test_article_mention(self, mock_get):
      """Test a fetched article becomes a single mention."""
      mock_get.return_value = html_response(ARTICLE_HTML)

      mentions = self.mentions("https://example.com/post")

      assert len(mentions) == 1
      mention = mentions[0]
      assert mention.title == "Article"
      assert mention.uri == "https://example.com/post"
      assert mention.description.startswith("Web article converted to Markdown (")
      assert mention.description.endswith("KB)")
      assert "Fetched from: https://example.com/post" in mention.data["markdown"]

      args, kwargs = mock_get.call_args
      assert kwargs["headers"]["User-Agent"] == "docctx-web2md/0.1.0"
      assert kwargs["timeout"] == 10.0

   @patch('requests.get')
   def test_custom_user_agent_and_timeout(self, mock_get):
      """Test settings control the request headers and timeout."""
      mock_get.return_value = html_response(ARTICLE_HTML)

      self.mentions("https://example.com/post", {"user_agent": "bot/2", "request_timeout": 2500})

      kwargs = mock_get.call_args[1]
      assert kwargs["headers"]["User-Agent"] == "bot/2"
      assert kwargs["timeout"] == 2.5

   @patch('requests.get')
   def test_not_found(self, mock_get):
      """Test 404 pages produce an error mention."""
      mock_get.return_value = html_response("missing", status_code=404)

      mentions = self.mentions("https://example.com/missing")

      assert mentions[0].title == "Error"
      assert mentions[0].description == "Page not found (404)"
      assert mentions[0].data["error_type"] == "NETWORK_ERROR"

   @patch('requests.get')
   def test_http_error(self, mock_get):
      """Test other error statuses."""
      mock_get.return_value = html_response("fail", status_code=503)

      assert self.mentions("https://example.com/x")[0].description == "HTTP error: 503"

   @patch('requests.get')
   def test_timeout(self, mock_get):
      """Test timeouts report the configured deadline."""
      mock_get.side_effect = requests.Timeout("slow")

      mentions = self.mentions("https://example.com/slow", {"request_timeout": 5000})

      assert mentions[0].description == "Request timeout after 5000ms"

   @patch('requests.get')
   def test_content_not_found(self, mock_get):
      """Test empty pages report missing content."""
      mock_get.return_value = html_response("<html><body></body></html>")

      mentions = self.mentions("https://example.com/empty")

      assert mentions[0].data["error_type"] == "CONTENT_NOT_FOUND"

   @patch('requests.get')
   def test_only_successful_responses_cached(self, mock_get):
      """Test successful pages are cached and errors are not."""
      mock_get.return_value = html_response(ARTICLE_HTML)
      self.mentions("https://example.com/post")
      self.mentions("https://example.com/post")
      assert mock_get.call_count == 1

      mock_get.return_value = html_response("missing", status_code=404)
      self.mentions("https://example.com/other")
      self.mentions("https://example.com/other")
      assert mock_get.call_count == 3

   @patch('requests.get')
   def test_save_local(self, mock_get, tmp_path):
      """Test markdown is written when saving is enabled."""
      mock_get.return_value = html_response(ARTICLE_HTML)

      mentions = self.mentions("https://example.com/post",
                               {"save_local": True, "save_directory": str(tmp_path)})

      saved = tmp_path / "example.com_post.md"
      assert saved.exists()
      assert saved.read_text(encoding='utf-8') == mentions[0].data["markdown"]

   @patch('requests.get')
   def test_save_failure_is_logged(self, mock_get, tmp_path):
      """Test a failed save still returns the article and logs the error."""
      mock_get.return_value = html_response(ARTICLE_HTML)
      blocked = tmp_path / "blocked"
      blocked.write_text("not a directory")

      with LogCapture('docctx.providers') as capture:
         mentions = self.mentions("https://example.com/post",
                                  {"save_local": True, "save_directory": str(blocked)})

      assert mentions[0].title == "Article"
      assert any("Failed to save markdown" in m for m in capture.get_messages(logging.ERROR))

   def test_output_path(self, tmp_path):
      """Test file names are derived from the URL."""
      assert output_path("https://zenn.dev/a/articles/b", tmp_path) == tmp_path / "zenn.dev_a_articles_b.md"

   def test_items(self):
      """Test items deliver the mention markdown."""
      mention = Mention(title="Article", uri="https://example.com/post", data={"markdown": "# Article"})

      items = asyncio.run(self.provider.items(mention))

      assert len(items) == 1
      assert items[0].content == "# Article"
      assert items[0].url == "https://example.com/post"
      assert asyncio.run(self.provider.items(Mention(title="Error"))) == []
