"""
Configuration module for docctx.
"""

from .settings import Config, DeepwikiSettings, Context7Settings, Web2MdSettings

__all__ = ["Config", "DeepwikiSettings", "Context7Settings", "Web2MdSettings"]
