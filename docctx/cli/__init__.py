"""
Command line interface for docctx.
"""

from .main import cli, main

__all__ = ["cli", "main"]
