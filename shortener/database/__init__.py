"""Mapping store layer for URL shortener."""

from .base import MappingStoreBase
from .memory import InMemoryMappingStore
from .postgres import PostgresMappingStore
from .cache import RedisCache
from .models import MappingStatus, ShortMapping

__all__ = [
    "MappingStoreBase",
    "InMemoryMappingStore",
    "PostgresMappingStore",
    "RedisCache",
    "MappingStatus",
    "ShortMapping",
]
