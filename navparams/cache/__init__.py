"""
Memoization layer - cached extraction and validation with hit/miss metrics.
"""

from .key_builder import HashKeyBuilder, extraction_key, validation_key
from .memo import CacheStats, MemoCache, Memoized, MemoizationLayer

__all__ = [
    "HashKeyBuilder",
    "extraction_key",
    "validation_key",
    "CacheStats",
    "MemoCache",
    "Memoized",
    "MemoizationLayer",
]
