"""Error taxonomy for the URL shortener."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Class of failure surfaced by the shortener service."""

    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class ShortenerError(Exception):
    """Base class for all domain errors.

    Every error carries a ``kind`` (used by transport adapters to pick a
    status code), a machine-readable ``code`` and a human ``message``.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    code: str = "INTERNAL"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "kind": self.kind.value,
            "message": self.message,
        }


class InvalidURLError(ShortenerError, ValueError):
    """Submitted URL is not an absolute http(s) URL."""

    kind = ErrorKind.VALIDATION
    code = "INVALID_URL"


class CodeExistsError(ShortenerError):
    """Short code is already assigned to a mapping."""

    kind = ErrorKind.CONFLICT
    code = "EXISTS"

    def __init__(self, short_code: str):
        super().__init__(f"Short code '{short_code}' already exists")
        self.short_code = short_code


class ActiveMappingExistsError(ShortenerError):
    """An active mapping for the URL was committed by another writer."""

    kind = ErrorKind.CONFLICT
    code = "EXISTS"

    def __init__(self, original_url: str):
        super().__init__(f"An active mapping already exists for '{original_url}'")
        self.original_url = original_url


class MappingNotFoundError(ShortenerError):
    """No mapping matches the given key and status."""

    kind = ErrorKind.NOT_FOUND
    code = "NOT_FOUND"


class InternalError(ShortenerError):
    """Storage or generator failure. Details are logged, never surfaced."""

    kind = ErrorKind.INTERNAL
    code = "INTERNAL"


class CodeGenerationExhaustedError(InternalError):
    """Every generated code collided with an existing one."""

    def __init__(self, attempts: int):
        super().__init__(f"Unable to generate a unique short code after {attempts} attempts")
        self.attempts = attempts
