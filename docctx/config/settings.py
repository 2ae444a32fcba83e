"""
Configuration management for docctx.
"""

import math
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from ..utils.helpers import clamp


class Config:
   """Process-wide configuration settings for docctx."""

   def __init__(self, output_dir: Optional[str] = None):
       """Initialize configuration with optional output directory."""
       # Output directory for saved markdown (web2md)
       self.output_dir = Path(output_dir) if output_dir else Path(
           os.getenv("DOCCTX_OUTPUT_DIR", ".web2md-output"))

       # HTTP settings
       self.user_agent = os.getenv("DOCCTX_USER_AGENT", "docctx/0.1.0")
       self.request_timeout = float(os.getenv("DOCCTX_REQUEST_TIMEOUT", "10.0"))
       self.deepwiki_timeout = float(os.getenv("DOCCTX_DEEPWIKI_TIMEOUT", "3.0"))

       # Remote endpoints
       self.deepwiki_base_url = os.getenv("DOCCTX_DEEPWIKI_URL", "https://deepwiki.com")
       self.deepwiki_chat_api_url = os.getenv("DOCCTX_DEEPWIKI_CHAT_API_URL",
                                              "https://api.devin.ai/ada/query")
       self.context7_base_url = os.getenv("DOCCTX_CONTEXT7_URL", "https://context7.com")

       # Response cache
       self.cache_max_size = int(os.getenv("DOCCTX_CACHE_MAX_SIZE", "100"))
       self.cache_ttl = float(os.getenv("DOCCTX_CACHE_TTL", "600"))
       self.search_cache_ttl = float(os.getenv("DOCCTX_SEARCH_CACHE_TTL", "300"))

       # Logging
       self.log_level = os.getenv("DOCCTX_LOG_LEVEL", "INFO")
       self.log_file = os.getenv("DOCCTX_LOG_FILE", None)

   @property
   def context7_api_url(self) -> str:
       """Base URL of the context7 REST API."""
       return f"{self.context7_base_url}/api"

   def __repr__(self):
       """String representation of config."""
       return f"Config(output_dir={self.output_dir}, user_agent={self.user_agent})"


def _numeric(value: Any, default, limits: Optional[tuple] = None):
   """Return value as a number clamped to limits, or the default when missing or unusable."""
   if value is None or isinstance(value, bool):
       return default
   try:
       number = float(value)
   except (TypeError, ValueError):
       return default
   if not number or math.isnan(number):
       return default
   if limits:
       number = clamp(number, *limits)
   elif math.isinf(number):
       return default
   return type(default)(number)


def _flag(value: Any, default: bool) -> bool:
   if value is None:
       return default
   if isinstance(value, str):
       return value.strip().lower() in ("1", "true", "yes", "on")
   return bool(value)


class ProviderSettings:
   """Mixin for settings dataclasses whose numeric knobs are clamped."""

   # name -> (min, max)
   LIMITS = {}

   @classmethod
   def from_dict(cls, values: Optional[Dict[str, Any]] = None):
       """Build settings from a partial dict, filling defaults and clamping ranges."""
       values = values or {}
       defaults = cls()
       kwargs = {}
       for f in fields(cls):
           default = getattr(defaults, f.name)
           raw = values.get(f.name)
           if isinstance(default, bool):
               kwargs[f.name] = _flag(raw, default)
           elif isinstance(default, (int, float)):
               kwargs[f.name] = _numeric(raw, default, cls.LIMITS.get(f.name))
           else:
               kwargs[f.name] = default if raw is None else raw
       return cls(**kwargs)


@dataclass
class DeepwikiSettings(ProviderSettings):
   """User-configurable knobs for the deepwiki provider."""
   LIMITS = {
       "max_mention_items": (1, 20),
       "max_tokens": (1000, 20000),
       "debounce_delay": (100, 1000),
   }

   max_mention_items: int = 5
   max_tokens: int = 3000
   debounce_delay: int = 300
   enable_navigation: bool = True


@dataclass
class Context7Settings(ProviderSettings):
   """User-configurable knobs for the context7 provider."""
   LIMITS = {
       "tokens": (1000, 100000),
       "mention_limit": (1, 20),
   }

   tokens: int = 10000
   mention_limit: int = 3


@dataclass
class Web2MdSettings(ProviderSettings):
   """User-configurable knobs for the web2md provider."""
   LIMITS = {
       "request_timeout": (1000, 60000),
       "max_tokens": (100, 50000),
       "debounce_delay": (100, 1000),
   }

   user_agent: str = "docctx-web2md/0.1.0"
   request_timeout: int = 10000
   max_tokens: int = 6000
   debounce_delay: int = 300
   save_local: bool = False
   save_directory: str = ".web2md-output"
