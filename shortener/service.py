"""Business logic service for URL shortener."""

import logging
from contextlib import asynccontextmanager
from typing import Optional, Dict

from .shortcode import ShortCodeGenerator
from .database.base import MappingStoreBase
from .database.cache import RedisCache
from .database.models import ShortMapping
from .common.validators import is_valid_url, is_valid_short_code
from .common.url_builder import build_short_url, extract_short_code
from .errors import (
    ActiveMappingExistsError,
    CodeExistsError,
    CodeGenerationExhaustedError,
    InternalError,
    InvalidURLError,
    MappingNotFoundError,
    ShortenerError,
)


class URLShortenerService:
    """Service layer for URL shortening business logic.

    Every public operation returns a result or raises a ``ShortenerError``.
    Failures from the store, cache or generator that are not already domain
    errors are logged and re-raised as ``InternalError``.
    """

    def __init__(
        self,
        store: MappingStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        cache: Optional[RedisCache] = None,
        logger: Optional[logging.Logger] = None,
        base_url: str = "http://localhost:9200",
        path_prefix: str = "",
        max_collision_retries: int = 5,
    ):
        """Initialize URL shortener service.

        Args:
            store: Mapping store instance
            short_code_generator: Optional short code generator
            cache: Optional cache for code resolution
            logger: Optional logger
            base_url: Base URL used when building short URLs
            path_prefix: Path prefix used when building short URLs
            max_collision_retries: Maximum insert attempts per add
        """
        if max_collision_retries < 1:
            raise ValueError("max_collision_retries must be at least 1")

        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.max_collision_retries = max_collision_retries

    async def add(self, original_url: str) -> ShortMapping:
        """Shorten a URL, returning the existing ACTIVE mapping if there is one.

        Args:
            original_url: The original long URL

        Returns:
            The ACTIVE mapping for the URL

        Raises:
            InvalidURLError: If the URL is not an absolute http(s) URL
            CodeGenerationExhaustedError: If every attempt collided
            InternalError: On storage failure
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise InvalidURLError(f"Invalid URL: {error}")

        async with self._internal_errors("add"):
            existing = await self.store.find_active_by_url(original_url)
            if existing:
                self.logger.debug(f"Reusing active mapping: {existing.code} -> {original_url}")
                return existing

            for attempt in range(1, self.max_collision_retries + 1):
                code = self.generator.generate()
                try:
                    mapping = await self.store.insert(code, original_url)
                except CodeExistsError:
                    self.logger.warning(
                        f"Code collision on attempt {attempt}/{self.max_collision_retries}: {code}"
                    )
                    continue
                except ActiveMappingExistsError:
                    # Another writer won the race for this URL
                    existing = await self.store.find_active_by_url(original_url)
                    if existing:
                        return existing
                    continue

                self.logger.info(f"Created short URL: {mapping.code} -> {original_url}")
                return mapping

            raise CodeGenerationExhaustedError(self.max_collision_retries)

    async def info(self, original_url: str) -> ShortMapping:
        """Get the most recent mapping for a URL, whatever its status.

        Raises:
            MappingNotFoundError: If the URL was never shortened
        """
        async with self._internal_errors("info"):
            mapping = await self.store.find_latest_by_url(original_url)

        if mapping is None:
            raise MappingNotFoundError(f"No mapping found for '{original_url}'")
        return mapping

    async def info_by_code(self, short_code: str) -> ShortMapping:
        """Get the mapping for a short code, whatever its status.

        Raises:
            MappingNotFoundError: If the code is unknown
        """
        async with self._internal_errors("info_by_code"):
            mapping = await self.store.find_by_code(short_code)

        if mapping is None:
            raise MappingNotFoundError(f"Short code '{short_code}' not found")
        return mapping

    async def deactivate(self, original_url: str) -> ShortMapping:
        """Deactivate the ACTIVE mapping for a URL.

        Of several concurrent calls for the same URL, exactly one succeeds.
        The code is marked deactivated in the cache before the store changes.

        Raises:
            MappingNotFoundError: If the URL has no ACTIVE mapping
        """
        async with self._internal_errors("deactivate"):
            active = await self.store.find_active_by_url(original_url)
            if active is None:
                raise MappingNotFoundError(f"No active mapping found for '{original_url}'")

            cache_key = self.cache.get_cache_key(active.code) if self.cache else None
            if self.cache:
                await self.cache.set(cache_key, RedisCache.DEACTIVATED)

            try:
                mapping = await self.store.deactivate_active(active.code)
            except Exception:
                # Store unchanged, the code still resolves
                if self.cache:
                    await self.cache.delete(cache_key)
                raise

            if mapping is None:
                raise MappingNotFoundError(f"No active mapping found for '{original_url}'")

        self.logger.info(f"Deactivated short URL: {mapping.code} -> {original_url}")
        return mapping

    async def query(self, short_code_or_url: str) -> str:
        """Resolve a short code (or full short URL) to its original URL.

        Raises:
            MappingNotFoundError: If the code is unknown, malformed or deactivated
        """
        short_code = extract_short_code(short_code_or_url or "")
        is_valid, _ = is_valid_short_code(short_code)
        if not is_valid:
            raise MappingNotFoundError(f"Short code '{short_code}' not found")

        async with self._internal_errors("query"):
            mapping = None
            cached_url = None
            if self.cache:
                cached_url = await self.cache.get(self.cache.get_cache_key(short_code))

            if cached_url == RedisCache.DEACTIVATED:
                self.logger.debug(f"Cache hit for deactivated {short_code}")
            elif cached_url:
                self.logger.debug(f"Cache hit for {short_code}")
                return cached_url
            else:
                mapping = await self.store.find_active_by_code(short_code)
                if mapping and self.cache:
                    # Never overwrites a deactivation marker written meanwhile
                    await self.cache.set_if_absent(
                        self.cache.get_cache_key(short_code), mapping.original_url
                    )

        if mapping is None:
            self.logger.warning(f"Short code not found: {short_code}")
            raise MappingNotFoundError(f"Short code '{short_code}' not found")

        self.logger.debug(f"Resolved URL: {short_code} -> {mapping.original_url}")
        return mapping.original_url

    def short_url(self, short_code: str, base_url: Optional[str] = None, path_prefix: Optional[str] = None) -> str:
        """Build the public short URL for a code."""
        return build_short_url(
            short_code=short_code,
            base_url=base_url or self.base_url,
            path_prefix=self.path_prefix if path_prefix is None else path_prefix,
        )

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()
        cache_healthy = await self.cache.ping() if self.cache else True

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()

    @asynccontextmanager
    async def _internal_errors(self, operation: str):
        """Convert unexpected store/cache/generator failures to InternalError."""
        try:
            yield
        except InternalError as e:
            self.logger.error(f"{operation} failed: {e.message}")
            raise
        except ShortenerError:
            raise
        except Exception as e:
            self.logger.exception(f"{operation} failed with unexpected error")
            raise InternalError(f"{operation} failed") from e
