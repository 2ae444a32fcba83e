"""
Storage module for docctx.
"""

from .cache import ResponseCache

__all__ = ["ResponseCache"]
