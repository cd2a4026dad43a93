"""Abstract base class for mapping store implementations."""

from abc import ABC, abstractmethod
from typing import Optional

from .models import ShortMapping


class MappingStoreBase(ABC):
    """Abstract base class for the code -> URL mapping table.

    The store is the only owner of mapping state. Implementations must make
    every operation atomic with respect to the others so that codes stay
    unique and a URL has at most one ACTIVE mapping at a time.
    """

    @abstractmethod
    async def insert(self, code: str, original_url: str) -> ShortMapping:
        """Persist a new ACTIVE mapping.

        Args:
            code: The short code to assign
            original_url: The original long URL

        Returns:
            The stored mapping

        Raises:
            CodeExistsError: If the code is already assigned (any status)
            ActiveMappingExistsError: If an ACTIVE mapping for the URL exists
        """
        pass

    @abstractmethod
    async def find_active_by_url(self, original_url: str) -> Optional[ShortMapping]:
        """Get the ACTIVE mapping for a URL.

        Args:
            original_url: The original long URL

        Returns:
            The active mapping or None
        """
        pass

    @abstractmethod
    async def find_latest_by_url(self, original_url: str) -> Optional[ShortMapping]:
        """Get the most recently created mapping for a URL, any status.

        Args:
            original_url: The original long URL

        Returns:
            The newest mapping or None if the URL was never shortened
        """
        pass

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[ShortMapping]:
        """Get the mapping for a code regardless of status."""
        pass

    @abstractmethod
    async def find_active_by_code(self, code: str) -> Optional[ShortMapping]:
        """Get the mapping for a code only if it is ACTIVE."""
        pass

    @abstractmethod
    async def deactivate(self, code: str) -> ShortMapping:
        """Mark a mapping DEACTIVATED.

        Deactivating an already deactivated mapping is a no-op.

        Args:
            code: The short code to deactivate

        Returns:
            The mapping with status DEACTIVATED

        Raises:
            MappingNotFoundError: If the code is unknown
        """
        pass

    @abstractmethod
    async def deactivate_active(self, code: str) -> Optional[ShortMapping]:
        """Move an ACTIVE mapping to DEACTIVATED as one atomic step.

        Of several concurrent callers for the same code, exactly one sees
        the transition.

        Args:
            code: The short code to deactivate

        Returns:
            The DEACTIVATED mapping, or None if the code is unknown or was
            not ACTIVE
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass
