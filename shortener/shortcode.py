"""Short code generation utilities."""

import itertools
import random
import string
import threading
from typing import Optional

from .common.validators import RESERVED_CODES


class ShortCodeGenerator:
    """Generate short codes for URLs.

    Codes are not guaranteed unique here. The mapping store rejects
    collisions and the service asks for another code.
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    STRATEGIES = ("random", "sequential")

    def __init__(
        self,
        default_length: int = 6,
        strategy: str = "random",
        start: int = 0,
    ):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
            strategy: "random" or "sequential"
            start: First counter value for the sequential strategy
        """
        if strategy not in self.STRATEGIES:
            raise ValueError(f"Unknown code strategy: {strategy}")
        if default_length < 1:
            raise ValueError("default_length must be positive")

        self.default_length = default_length
        self.strategy = strategy
        self._counter = itertools.count(start)
        self._counter_lock = threading.Lock()

    def generate(self) -> str:
        """Generate the next candidate code using the configured strategy."""
        while True:
            if self.strategy == "sequential":
                with self._counter_lock:
                    number = next(self._counter)
                code = self.generate_sequential(number)
            else:
                code = self.generate_random()

            if code.lower() not in RESERVED_CODES:
                return code

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(random.choices(self.BASE62_CHARS, k=length))

    def generate_sequential(self, sequence_number: int, length: Optional[int] = None) -> str:
        """Generate short code from sequence number.

        Args:
            sequence_number: Sequential ID
            length: Minimum length of the code (uses default if not specified)

        Returns:
            Short code based on sequence number
        """
        length = length or self.default_length

        code = self._int_to_base62(sequence_number)

        # Pad with the zero digit so every code has the same minimum width
        if len(code) < length:
            code = code.rjust(length, self.BASE62_CHARS[0])

        return code

    def _int_to_base62(self, num: int) -> str:
        """Convert integer to base62 string."""
        if num == 0:
            return self.BASE62_CHARS[0]

        result = []
        base = len(self.BASE62_CHARS)

        while num > 0:
            remainder = num % base
            result.append(self.BASE62_CHARS[remainder])
            num = num // base

        return ''.join(reversed(result))
