from __future__ import annotations

from .CacheStore import CacheStore, ArrayCacheStore, RedisCacheStore

__all__ = ['CacheStore', 'ArrayCacheStore', 'RedisCacheStore']
