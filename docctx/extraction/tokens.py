"""
Token counting for size reporting and truncation.

Two estimators are provided: a cheap character-ratio heuristic used for
deepwiki pages, and an exact count based on the ``cl100k_base`` tiktoken
encoding used for converted web articles.
"""

import math
import re
from functools import lru_cache

import tiktoken

# Empirical chars-per-token ratio used to turn a token budget into characters.
CHARS_PER_TOKEN = 3.5

ENGLISH_CHARS_PER_TOKEN = 4.0
JAPANESE_CHARS_PER_TOKEN = 3.0
CODE_CHARS_PER_TOKEN = 3.5

DEFAULT_ENCODING = "cl100k_base"

_JAPANESE_CHAR = re.compile(r'[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]')
_CODE_BLOCK = re.compile(r'```[\s\S]*?```')


def estimate_token_count(text: str) -> int:
    """Estimate the token count of text from its length and script mix."""
    if not text:
        return 0

    japanese_chars = len(_JAPANESE_CHAR.findall(text))
    code_chars = sum(len(block) for block in _CODE_BLOCK.findall(text))

    ratio = ENGLISH_CHARS_PER_TOKEN
    if japanese_chars > len(text) * 0.1:
        ratio = JAPANESE_CHARS_PER_TOKEN
    elif code_chars > len(text) * 0.2:
        ratio = CODE_CHARS_PER_TOKEN

    return math.ceil(len(text) / ratio)


@lru_cache(maxsize=4)
def _get_encoding(name: str = DEFAULT_ENCODING):
    return tiktoken.get_encoding(name)


def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """Count tokens in text exactly using a tiktoken encoding."""
    if not text:
        return 0
    return len(_get_encoding(encoding_name).encode(text, disallowed_special=()))
