"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .service import URLShortenerService
from .rewriter import TextRewriter, scan_urls
from .errors import ErrorKind, ShortenerError

__all__ = [
    "ShortCodeGenerator",
    "URLShortenerService",
    "TextRewriter",
    "scan_urls",
    "ErrorKind",
    "ShortenerError",
]
