"""
Utilities module for docctx.
"""

from .logging import get_logger, setup_logging
from .helpers import sanitize_filename, clamp, format_duration, format_number
from .debounce import Debouncer

__all__ = [
   "get_logger",
   "setup_logging",
   "sanitize_filename",
   "clamp",
   "format_duration",
   "format_number",
   "Debouncer",
]
