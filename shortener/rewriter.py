"""Rewrite free text by shortening every embedded URL."""

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional

from .service import URLShortenerService

UrlScanner = Callable[[str], Iterable[str]]

# http(s) URL whose host contains at least one dot
URL_PATTERN = re.compile(
    r"https?://[a-zA-Z0-9./?:@\-_=#]+\.[a-zA-Z0-9&./?:@\-_=#]*",
    re.IGNORECASE,
)


def scan_urls(text: str) -> List[str]:
    """Default URL scanner: distinct URLs in order of first appearance."""
    return list(dict.fromkeys(URL_PATTERN.findall(text)))


class TextRewriter:
    """Replace every URL in a piece of text with its short URL."""

    def __init__(
        self,
        service: URLShortenerService,
        base_url: Optional[str] = None,
        path_prefix: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize text rewriter.

        Args:
            service: Service used to shorten each URL
            base_url: Base URL for the short URLs (service default if None)
            path_prefix: Path prefix for the short URLs (service default if None)
            logger: Optional logger
        """
        self.service = service
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.logger = logger or logging.getLogger(__name__)

    async def rewrite(self, text: str, url_scanner: Optional[UrlScanner] = None) -> str:
        """Shorten every distinct URL in ``text`` and substitute all occurrences.

        ``add`` is called once per distinct URL, in order of first
        appearance. Substitution only happens once every URL has been
        shortened, so a failure leaves nothing half-rewritten.

        Args:
            text: Free text to rewrite
            url_scanner: Callable returning the URL substrings in ``text``

        Returns:
            The rewritten text

        Raises:
            ShortenerError: Propagated from the first failing ``add``
        """
        if not text:
            return text

        scanner = url_scanner or scan_urls
        urls = [url for url in dict.fromkeys(scanner(text)) if url]
        if not urls:
            return text

        replacements: Dict[str, str] = {}
        for url in urls:
            mapping = await self.service.add(url)
            replacements[url] = self.service.short_url(
                mapping.code,
                base_url=self.base_url,
                path_prefix=self.path_prefix,
            )

        # Longest first so a URL that prefixes another is not spliced into it
        pattern = re.compile(
            "|".join(re.escape(url) for url in sorted(replacements, key=len, reverse=True))
        )
        rewritten = pattern.sub(lambda m: replacements[m.group(0)], text)

        self.logger.info(f"Rewrote text with {len(replacements)} distinct URL(s)")
        return rewritten
