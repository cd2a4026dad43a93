"""In-memory mapping store."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .base import MappingStoreBase
from .models import MappingStatus, ShortMapping
from ..errors import ActiveMappingExistsError, CodeExistsError, MappingNotFoundError


class InMemoryMappingStore(MappingStoreBase):
    """Mapping store backed by process-local dictionaries.

    A single asyncio lock serializes every read and write, so the uniqueness
    checks in ``insert`` and the write that follows are one atomic step.
    Suitable for tests and single-process deployments.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._by_code: Dict[str, ShortMapping] = {}
        # Codes per URL in creation order
        self._codes_by_url: Dict[str, List[str]] = {}
        self._lock = asyncio.Lock()

    async def insert(self, code: str, original_url: str) -> ShortMapping:
        async with self._lock:
            if code in self._by_code:
                self.logger.warning(f"Short code already exists: {code}")
                raise CodeExistsError(code)

            if self._active_for_url(original_url) is not None:
                raise ActiveMappingExistsError(original_url)

            mapping = ShortMapping(
                code=code,
                original_url=original_url,
                status=MappingStatus.ACTIVE,
                created_at=datetime.now(timezone.utc),
            )
            self._by_code[code] = mapping
            self._codes_by_url.setdefault(original_url, []).append(code)

        self.logger.debug(f"Inserted mapping: {code} -> {original_url}")
        return mapping

    async def find_active_by_url(self, original_url: str) -> Optional[ShortMapping]:
        async with self._lock:
            return self._active_for_url(original_url)

    async def find_latest_by_url(self, original_url: str) -> Optional[ShortMapping]:
        async with self._lock:
            codes = self._codes_by_url.get(original_url)
            if not codes:
                return None
            return self._by_code[codes[-1]]

    async def find_by_code(self, code: str) -> Optional[ShortMapping]:
        async with self._lock:
            return self._by_code.get(code)

    async def find_active_by_code(self, code: str) -> Optional[ShortMapping]:
        async with self._lock:
            mapping = self._by_code.get(code)
            if mapping and mapping.is_active:
                return mapping
            return None

    async def deactivate(self, code: str) -> ShortMapping:
        async with self._lock:
            mapping = self._by_code.get(code)
            if mapping is None:
                raise MappingNotFoundError(f"Short code '{code}' not found")

            mapping = mapping.deactivated()
            self._by_code[code] = mapping

        return mapping

    async def deactivate_active(self, code: str) -> Optional[ShortMapping]:
        async with self._lock:
            mapping = self._by_code.get(code)
            if mapping is None or not mapping.is_active:
                return None

            mapping = mapping.deactivated()
            self._by_code[code] = mapping

        return mapping

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        pass

    async def count(self) -> int:
        """Number of stored mappings, any status."""
        async with self._lock:
            return len(self._by_code)

    def _active_for_url(self, original_url: str) -> Optional[ShortMapping]:
        # Caller holds the lock
        for code in reversed(self._codes_by_url.get(original_url, [])):
            mapping = self._by_code[code]
            if mapping.is_active:
                return mapping
        return None
