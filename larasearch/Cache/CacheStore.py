from __future__ import annotations

from typing import Any, Callable, Dict, Optional
from abc import ABC, abstractmethod
import json
import time

import redis


class CacheStore(ABC):
    """Abstract cache store following Laravel's cache interface."""
    
    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Retrieve an item from the cache."""
        pass
    
    @abstractmethod
    def put(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store an item in the cache."""
        pass
    
    @abstractmethod
    def has(self, key: str) -> bool:
        """Determine if an item exists in the cache."""
        pass
    
    @abstractmethod
    def forget(self, key: str) -> bool:
        """Remove an item from the cache."""
        pass
    
    @abstractmethod
    def flush(self) -> bool:
        """Remove all items from the cache."""
        pass
    
    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Alias of put() for PSR-16 style callers."""
        return self.put(key, value, ttl)
    
    def remember(self, key: str, ttl: Optional[int], callback: Callable[[], Any]) -> Any:
        """Get an item from cache or store the result of callback."""
        if self.has(key):
            return self.get(key)
        value = callback()
        self.put(key, value, ttl)
        return value


class ArrayCacheStore(CacheStore):
    """In-memory array cache store."""
    
    def __init__(self) -> None:
        self.storage: Dict[str, Dict[str, Any]] = {}
    
    def get(self, key: str, default: Any = None) -> Any:
        """Retrieve an item from the cache."""
        if self.has(key):
            return self.storage[key]['value']
        return default
    
    def put(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store an item in the cache."""
        expires_at = None if ttl is None else time.time() + ttl
        self.storage[key] = {
            'value': value,
            'expires_at': expires_at
        }
        return True
    
    def has(self, key: str) -> bool:
        """Determine if an unexpired item exists in the cache."""
        item = self.storage.get(key)
        if item is None:
            return False
        if item['expires_at'] is not None and item['expires_at'] <= time.time():
            # Item has expired
            del self.storage[key]
            return False
        return True
    
    def forget(self, key: str) -> bool:
        """Remove an item from the cache."""
        return self.storage.pop(key, None) is not None
    
    def flush(self) -> bool:
        """Remove all items from the cache."""
        self.storage.clear()
        return True


class RedisCacheStore(CacheStore):
    """Redis cache store keeping JSON encoded values."""
    
    def __init__(self, url: str = 'redis://localhost:6379/0', prefix: str = 'larasearch:', client: Optional[redis.Redis] = None) -> None:
        self.client = client or redis.Redis.from_url(url)
        self.prefix = prefix
    
    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"
    
    def get(self, key: str, default: Any = None) -> Any:
        """Retrieve an item from Redis."""
        raw = self.client.get(self._key(key))
        if raw is None:
            return default
        return json.loads(raw)
    
    def put(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store an item in Redis."""
        return bool(self.client.set(self._key(key), json.dumps(value, default=str), ex=ttl))
    
    def has(self, key: str) -> bool:
        return bool(self.client.exists(self._key(key)))
    
    def forget(self, key: str) -> bool:
        """Remove an item from Redis."""
        return bool(self.client.delete(self._key(key)))
    
    def flush(self) -> bool:
        """Remove every prefixed item from Redis."""
        keys = list(self.client.scan_iter(match=f"{self.prefix}*"))
        if keys:
            self.client.delete(*keys)
        return True
