"""
Rendering of deepwiki chat sessions as markdown.
"""

import re
from typing import Any, Dict

RELEVANT_CONTEXT = re.compile(r'<relevant_context>[\s\S]*?</relevant_context>')

EMPTY_HISTORY = "No chat history available."


def clean_title(title: str) -> str:
    """Remove <relevant_context> blocks the chat UI prepends to titles."""
    if not title:
        return ""
    return RELEVANT_CONTEXT.sub('', title).strip()


def format_chat_history(data: Dict[str, Any]) -> str:
    """Format chat history JSON as markdown, one section per query.

    Only streamed ``chunk`` responses are kept; code references, file
    contents, stats and control records are skipped.
    """
    queries = data.get("queries") or []
    if not queries:
        return EMPTY_HISTORY

    sections = [f"# {clean_title(str(data.get('title') or ''))}"]

    for number, query in enumerate((q for q in queries if isinstance(q, dict)), 1):
        lines = [
            f"## Query {number}",
            "",
            f"**User Question:** {str(query.get('user_query') or '').strip()}",
        ]

        responses = query.get("response")
        if not isinstance(responses, list):
            responses = []

        answer = "".join(
            item["data"]
            for item in responses
            if isinstance(item, dict) and item.get("type") == "chunk" and isinstance(item.get("data"), str)
        ).strip()

        if answer:
            lines.extend(["", "**AI Response:**", "", answer])

        lines.extend(["", "---"])
        sections.append("\n".join(lines))

    return "\n\n".join(sections)
