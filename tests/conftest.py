"""
Shared fixtures for docctx tests.
"""

import json

import pytest


class FakeEncoding:
   """Offline stand-in for a tiktoken encoding: one token per 4 characters."""

   def encode(self, text, disallowed_special=()):
      return [text[i:i + 4] for i in range(0, len(text), 4)]


@pytest.fixture(autouse=True)
def offline_tokenizer(monkeypatch):
   """Keep exact token counting from downloading encoding files."""
   monkeypatch.setattr('docctx.extraction.tokens._get_encoding',
                       lambda name="cl100k_base": FakeEncoding())


OVERVIEW_PAGE = """# Overview

<details>
<summary>Relevant source files</summary>

- packages/react/index.js
- packages/react-dom/index.js
</details>

React is a JavaScript library for building user interfaces.

## Purpose and Scope

This document covers the repository layout.

## Architecture

Packages are published from a monorepo.
"""

HOOKS_PAGE = """# Hooks System

Hooks let function components use state and other React features without writing a class component.

## useState

Declares a state variable.

## useEffect

Synchronizes a component with an external system.
"""

RECONCILER_PAGE = """# Reconciler

The reconciler computes the minimal set of changes needed to update the rendered tree.

## Fiber Architecture

Each fiber is a unit of work.
"""

WIKI_PAGES = [OVERVIEW_PAGE, HOOKS_PAGE, RECONCILER_PAGE]


def flight_script(chunk):
   """Wrap a text chunk the way Next.js streams it into the page."""
   return f'<script>self.__next_f.push([1,{json.dumps(chunk)}])</script>'


def flight_html(chunks):
   body = "\n".join(flight_script(chunk) for chunk in chunks)
   return f"<!DOCTYPE html><html><head></head><body>{body}</body></html>"


@pytest.fixture
def wiki_html():
   """deepwiki-style HTML with three pages and some metadata chunks."""
   return flight_html(['1:HL["/_next/static/css/app.css","style"]'] + WIKI_PAGES + ['2:["$","div",null,{}]'])
