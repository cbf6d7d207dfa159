"""
Cache module for storing fetched weather records.

Provides an in-memory store with lazy TTL expiry.
"""

from skycast.cache.memory import CacheEntry, CacheStore

__all__ = ["CacheEntry", "CacheStore"]
