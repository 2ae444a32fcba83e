"""
docctx - Documentation context providers for AI assistants

Fetches library documentation (context7), repository wikis (deepwiki) and
web articles (web2md) and reshapes them into size-bounded markdown.
"""

__version__ = "0.1.0"
__author__ = "docctx contributors"

from .config.settings import Config
from .providers.context7 import Context7Provider
from .providers.deepwiki import DeepwikiProvider
from .providers.web2md import Web2MdProvider

class DocCtx:
   """Main docctx interface bundling the providers."""

   def __init__(self, config=None):
       """Initialize docctx with optional config."""
       self.config = config or Config()
       self.deepwiki = None
       self.context7 = None
       self.web2md = None

   def get_deepwiki(self):
       """Get or create deepwiki provider instance."""
       if self.deepwiki is None:
           self.deepwiki = DeepwikiProvider(self.config)
       return self.deepwiki

   def get_context7(self):
       """Get or create context7 provider instance."""
       if self.context7 is None:
           self.context7 = Context7Provider(self.config)
       return self.context7

   def get_web2md(self):
       """Get or create web2md provider instance."""
       if self.web2md is None:
           self.web2md = Web2MdProvider(self.config)
       return self.web2md

   def get_provider(self, name):
       """Get a provider by name (deepwiki, context7 or web2md)."""
       getters = {
           "deepwiki": self.get_deepwiki,
           "context7": self.get_context7,
           "web2md": self.get_web2md,
       }
       if name not in getters:
           raise KeyError(f"Unknown provider: {name}")
       return getters[name]()

   async def mentions(self, provider, query, settings=None):
       """Resolve a query into mentions with the named provider."""
       return await self.get_provider(provider).mentions(query, settings)

   async def items(self, provider, mention, settings=None):
       """Resolve a mention into items with the named provider."""
       return await self.get_provider(provider).items(mention, settings)

__all__ = [
   "DocCtx",
   "Config",
   "DeepwikiProvider",
   "Context7Provider",
   "Web2MdProvider",
   "__version__",
   "__author__",
]
