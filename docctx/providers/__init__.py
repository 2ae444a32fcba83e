"""
Context providers for docctx.
"""

from .base import ContextProvider, Item, Mention, ProviderMeta, create_error_mention
from .context7 import Context7Provider
from .deepwiki import DeepwikiProvider, parse_input_query
from .web2md import ErrorType, Web2MdProvider

__all__ = [
    "ContextProvider",
    "Item",
    "Mention",
    "ProviderMeta",
    "create_error_mention",
    "Context7Provider",
    "DeepwikiProvider",
    "parse_input_query",
    "ErrorType",
    "Web2MdProvider",
]
