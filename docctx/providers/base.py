"""
Common provider types: mentions, items and the provider interface.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config.settings import Config
from ..utils.logging import get_logger


@dataclass
class Mention:
    """A selectable reference offered to the user while typing."""
    title: str
    uri: str = ""
    description: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return bool(self.data.get("is_error"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "uri": self.uri,
            "description": self.description,
            "data": dict(self.data),
        }


@dataclass
class Item:
    """Content delivered to the AI for a chosen mention."""
    title: str
    content: str
    url: Optional[str] = None
    hover: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"title": self.title, "ai": {"content": self.content}}
        if self.url:
            result["url"] = self.url
        if self.hover:
            result["ui"] = {"hover": {"text": self.hover}}
        return result


@dataclass
class ProviderMeta:
    """Name and mention prompt shown by the host."""
    name: str
    mention_label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "mentions": {"label": self.mention_label}}


def create_error_mention(title: str, description: str) -> List[Mention]:
    """Build the single-mention result used to report a failure."""
    return [
        Mention(
            title=f"Error: {title}",
            uri="",
            description=description,
            data={
                "content": f"Error occurred: {description}",
                "is_error": True,
            },
        )
    ]


class ContextProvider(ABC):
    """Base class for providers that turn a query into mentions and items."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize provider with configuration."""
        self.config = config or Config()
        self.logger = get_logger(self.__class__.__module__)

    @abstractmethod
    def meta(self) -> ProviderMeta:
        """Describe the provider."""

    @abstractmethod
    async def mentions(self, query: str, settings: Optional[Dict[str, Any]] = None) -> List[Mention]:
        """Resolve a user query into mentions."""

    @abstractmethod
    async def items(self, mention: Mention, settings: Optional[Dict[str, Any]] = None) -> List[Item]:
        """Resolve a chosen mention into content items."""

    async def run_blocking(self, fn, *args, **kwargs):
        """Run a blocking fetch off the event loop."""
        return await asyncio.to_thread(fn, *args, **kwargs)
