"""
Size-bounded truncation of markdown that keeps the heading hierarchy sane.
"""

import re
from typing import Callable, Optional

from .tokens import CHARS_PER_TOKEN, count_tokens, estimate_token_count

TRUNCATION_MARKER = "(content was truncated)"

HEADING = re.compile(r'^(#{1,6})\s+')


def strip_truncation_marker(content: str) -> str:
    """Remove a trailing truncation marker left by an earlier pass."""
    stripped = content.rstrip()
    if stripped.endswith(TRUNCATION_MARKER):
        return stripped[:-len(TRUNCATION_MARKER)].rstrip()
    return content


def _with_marker(body: str) -> str:
    body = body.strip()
    return f"{body}\n\n{TRUNCATION_MARKER}" if body else TRUNCATION_MARKER


def _truncate_lines(body: str, budget: int, measure: Callable[[str], int]) -> str:
    """Keep whole lines while their summed cost fits in budget.

    The line at the cutoff is still kept when it is a heading no more than
    one level deeper than the last heading kept.
    """
    kept = []
    used = 0
    last_heading_level = 0

    for line in body.split('\n'):
        cost = measure(line)
        heading = HEADING.match(line.strip())

        if used + cost > budget:
            if heading and len(heading.group(1)) <= last_heading_level + 1:
                kept.append(line)
            break

        if heading:
            last_heading_level = len(heading.group(1))

        kept.append(line)
        used += cost

    return _with_marker('\n'.join(kept))


def truncate_preserving_structure(content: str, max_length: int) -> str:
    """Truncate content to roughly max_length characters on line boundaries."""
    if len(content) <= max_length:
        return content

    body = strip_truncation_marker(content)
    if len(body) <= max_length:
        return _with_marker(body)

    return _truncate_lines(body, max_length, lambda line: len(line) + 1)


def apply_size_limit(content: str, max_tokens: Optional[int],
                     estimator: Callable[[str], int] = estimate_token_count) -> str:
    """Limit content to an estimated token budget.

    Content within budget is returned unchanged. Otherwise the budget is
    converted to characters with CHARS_PER_TOKEN and the content is cut with
    truncate_preserving_structure.
    """
    if not max_tokens or max_tokens <= 0:
        return content

    if estimator(content) <= max_tokens:
        return content

    target_length = int(max_tokens * CHARS_PER_TOKEN)
    return truncate_preserving_structure(content, target_length)


def truncate_by_tokens(content: str, max_tokens: int,
                       counter: Callable[[str], int] = count_tokens) -> str:
    """Truncate content so its exact token count stays within max_tokens."""
    if counter(content) <= max_tokens:
        return content

    body = strip_truncation_marker(content)
    if counter(body) <= max_tokens:
        return _with_marker(body)

    return _truncate_lines(body, max_tokens, lambda line: counter(line + '\n'))
