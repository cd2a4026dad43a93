"""Common utilities for URL shortener."""

from .validators import is_valid_url, is_valid_short_code, RESERVED_CODES
from .headers import extract_forwarded_headers, build_base_url, resolve_path_prefix
from .url_builder import build_short_url, extract_short_code
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "RESERVED_CODES",
    "extract_forwarded_headers",
    "build_base_url",
    "resolve_path_prefix",
    "build_short_url",
    "extract_short_code",
    "setup_logging",
    "get_logger",
]
