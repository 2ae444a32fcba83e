"""
Tests for the context7 provider.
"""

import asyncio
import json

import requests
from unittest.mock import Mock, patch

from docctx.config.settings import Config
from docctx.providers.base import Mention
from docctx.providers.context7 import Context7Provider, process_json_response, split_query

SEARCH_RESULTS = {
   "results": [
      {"id": "/vuejs/core", "title": "Vue", "description": "Vue framework",
       "totalTokens": 500, "trustScore": 8},
      {"id": "/facebook/react", "title": "React", "description": "A JS library",
       "totalTokens": 1000, "trustScore": 9},
      {"id": "/sveltejs/svelte", "title": "Svelte", "description": "Compiler",
       "totalTokens": 700, "trustScore": 10},
   ]
}


def json_response(data, status_code=200):
   response = Mock()
   response.status_code = status_code
   response.json.return_value = data
   return response


def text_response(text, status_code=200):
   response = Mock()
   response.status_code = status_code
   response.text = text
   return response


class TestHelpers:
   """Test cases for context7 helper functions."""

   def test_split_query(self):
      """Test the first word is the library and the rest the topic."""
      assert split_query("React  Hooks State") == ("react", "hooks state")
      assert split_query("react") == ("react", None)
      assert split_query("  ") == ("", None)

   def test_process_json_response(self):
      """Test JSON documentation is compacted."""
      payload = json.dumps([{
         "codeId": "c1",
         "codeTitle": "useState",
         "codeDescription": "Declare state",
         "codeLanguage": "js",
         "codeTokens": 12,
         "pageTitle": "Hooks",
         "codeList": [{"language": "js", "code": "const [a, setA] = useState(0)"}],
         "relevance": 0.9,
      }])

      result = json.loads(process_json_response(payload))

      assert result == [{
         "id": "c1",
         "title": "useState",
         "description": "Declare state",
         "lang": "js",
         "page": "Hooks",
         "codes": ["const [a, setA] = useState(0)"],
      }]

   def test_process_invalid_json(self):
      """Test unparseable input is returned unchanged."""
      assert process_json_response("not json") == "not json"


class TestContext7Provider:
   """Test cases for Context7Provider."""

   def setup_method(self):
      """Setup test fixtures."""
      self.config = Config()
      self.provider = Context7Provider(self.config)

   def mentions(self, query, settings=None):
      return asyncio.run(self.provider.mentions(query, settings))

   def test_meta(self):
      """Test provider metadata."""
      assert self.provider.meta().name == "Context7"

   def test_empty_query(self):
      """Test blank input yields nothing."""
      assert self.mentions("") == []

   @patch('requests.get')
   def test_ranked_mentions(self, mock_get):
      """Test search results are fuzzy ranked on the library word."""
      mock_get.return_value = json_response(SEARCH_RESULTS)

      mentions = self.mentions("React hooks")

      assert len(mentions) == 1
      mention = mentions[0]
      assert mention.title == "React"
      assert mention.uri == "https://context7.com/facebook/react"
      assert mention.description == "A JS library [1000]"
      assert mention.data == {"id": "/facebook/react", "topic": "hooks"}

      args, kwargs = mock_get.call_args
      assert args[0] == "https://context7.com/api/v1/search"
      assert kwargs["params"] == {"query": "react"}

   @patch('requests.get')
   def test_trust_score_fallback(self, mock_get):
      """Test unmatched queries fall back to trust score order."""
      mock_get.return_value = json_response(SEARCH_RESULTS)

      mentions = self.mentions("zzz", {"mention_limit": 2})

      assert [m.title for m in mentions] == ["Svelte", "React"]

   @patch('requests.get')
   def test_no_results(self, mock_get):
      """Test empty search results."""
      mock_get.return_value = json_response({"results": []})
      assert self.mentions("react") == []

   @patch('requests.get')
   def test_search_cached(self, mock_get):
      """Test the same library query searches once."""
      mock_get.return_value = json_response(SEARCH_RESULTS)

      self.mentions("react")
      self.mentions("react hooks")

      assert mock_get.call_count == 1

   @patch('requests.get')
   def test_search_failure_not_cached(self, mock_get):
      """Test failed searches yield nothing and are retried."""
      mock_get.return_value = json_response({}, status_code=500)

      assert self.mentions("react") == []
      assert self.mentions("react") == []
      assert mock_get.call_count == 2

   @patch('requests.get')
   def test_search_network_error(self, mock_get):
      """Test network errors yield nothing."""
      mock_get.side_effect = requests.ConnectionError("down")
      assert self.mentions("react") == []


class TestContext7Items:
   """Test cases for context7 documentation items."""

   def setup_method(self):
      """Setup test fixtures."""
      self.provider = Context7Provider(Config())
      self.mention = Mention(title="React", uri="https://context7.com/facebook/react",
                             data={"id": "/facebook/react", "topic": "hooks"})

   def items(self, mention, settings=None):
      return asyncio.run(self.provider.items(mention, settings))

   @patch('requests.get')
   def test_documentation_item(self, mock_get):
      """Test documentation is fetched with token budget and topic."""
      mock_get.return_value = text_response("## useState\n\nDocs text")

      items = self.items(self.mention, {"tokens": 5000})

      assert len(items) == 1
      item = items[0]
      assert item.content == "## useState\n\nDocs text"
      assert item.title == "context7 docs for repository: /facebook/react / topic: hooks"
      assert item.url == "https://context7.com/facebook/react/llms.txt?tokens=5000&topic=hooks"
      assert item.hover == "/facebook/react#hooks"

      args, kwargs = mock_get.call_args
      assert args[0] == "https://context7.com/api/v1/facebook/react"
      assert kwargs["params"] == {"tokens": "5000", "type": "txt", "topic": "hooks"}
      assert kwargs["headers"]["X-Context7-Source"] == "mcp-server"

   @patch('requests.get')
   def test_no_topic(self, mock_get):
      """Test the topic parameter is omitted when absent."""
      mock_get.return_value = text_response("Docs")
      mention = Mention(title="React", data={"id": "/facebook/react", "topic": None})

      self.items(mention)

      assert "topic" not in mock_get.call_args[1]["params"]

   @patch('requests.get')
   def test_empty_documentation(self, mock_get):
      """Test sentinel bodies produce no items."""
      for body in ["", "No content available", "No context data available"]:
         mock_get.return_value = text_response(body)
         assert self.items(self.mention) == []

   @patch('requests.get')
   def test_fetch_failure(self, mock_get):
      """Test HTTP errors produce no items."""
      mock_get.return_value = text_response("oops", status_code=500)
      assert self.items(self.mention) == []

   def test_mention_without_id(self):
      """Test mentions without a library id are ignored."""
      assert self.items(Mention(title="x")) == []
