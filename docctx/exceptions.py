"""
Exception types for docctx.
"""


class DocCtxError(Exception):
    """Base class for errors surfaced to provider callers."""


class InvalidQueryError(DocCtxError, ValueError):
    """User input does not match any recognized query shape."""


class UpstreamError(DocCtxError):
    """Remote fetch failed or returned a non-success status."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """Remote fetch exceeded its deadline."""


class ContentNotFoundError(DocCtxError):
    """Fetch succeeded but no usable content could be extracted."""


class ConversionError(DocCtxError):
    """Extracted HTML could not be converted to markdown."""
