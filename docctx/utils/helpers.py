"""
Helper utilities for docctx.
"""

import re
import time
from typing import Union
from urllib.parse import urlparse


def sanitize_filename(filename: str, max_length: int = 200) -> str:
   """Sanitize a string to be safe for use as a filename."""
   # Drop the scheme so URLs do not all start with "https_"
   sanitized = re.sub(r'^[a-zA-Z][a-zA-Z0-9+.-]*://', '', filename)

   # Anything outside a conservative set becomes an underscore
   sanitized = re.sub(r'[^a-zA-Z0-9._-]', '_', sanitized)

   # Collapse multiple underscores
   sanitized = re.sub(r'_+', '_', sanitized)

   # Remove leading/trailing underscores and dots
   sanitized = sanitized.strip('_. ')

   if len(sanitized) > max_length:
       sanitized = sanitized[:max_length].rstrip('_. ')

   if not sanitized:
       sanitized = "unnamed"

   return sanitized


def format_duration(seconds: float) -> str:
   """Format duration in seconds as human-readable string."""
   if seconds < 1:
       return f"{seconds*1000:.0f}ms"
   elif seconds < 60:
       return f"{seconds:.1f}s"
   elif seconds < 3600:
       minutes = int(seconds // 60)
       secs = int(seconds % 60)
       return f"{minutes}m {secs}s"
   else:
       hours = int(seconds // 3600)
       minutes = int((seconds % 3600) // 60)
       return f"{hours}h {minutes}m"


def format_number(value: int) -> str:
   """Format an integer with thousands separators (1500 -> '1,500')."""
   return f"{value:,}"


def clamp(value, minimum, maximum):
   """Clamp value into the closed range [minimum, maximum]."""
   return min(max(value, minimum), maximum)


def truncate_at_word(text: str, max_length: int = 150, suffix: str = "...") -> str:
   """Cut text at the last word boundary before max_length and append suffix."""
   if len(text) <= max_length:
       return text

   cut_index = text.rfind(' ', 0, max_length + 1)
   if cut_index <= 0:
       cut_index = max_length

   return text[:cut_index] + suffix


def is_http_url(url: str) -> bool:
   """Check whether a string is an absolute http(s) URL."""
   if not url:
       return False
   try:
       parsed = urlparse(url)
   except ValueError:
       return False
   return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


class Timer:
   """Simple timer context manager."""

   def __init__(self, name: str = "Operation"):
       """Initialize timer with optional name."""
       self.name = name
       self.start_time = None
       self.end_time = None

   def __enter__(self):
       """Start timing."""
       self.start_time = time.time()
       return self

   def __exit__(self, exc_type, exc_val, exc_tb):
       """Stop timing."""
       self.end_time = time.time()

   @property
   def elapsed(self) -> float:
       """Get elapsed time in seconds."""
       if self.start_time is None:
           return 0.0

       end = self.end_time if self.end_time else time.time()
       return end - self.start_time

   def __str__(self) -> str:
       """String representation of timer."""
       return f"{self.name}: {format_duration(self.elapsed)}"
