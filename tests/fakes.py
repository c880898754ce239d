"""Test doubles for the search client, Redis, the reporter and client factory."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple
import fnmatch

from larasearch.ConnectionManager import ClientFactory, ConnectionConfig


class FakeElasticsearch:
    """In-memory stand-in for the Elasticsearch client recording every call."""
    
    def __init__(self, hits: Optional[List[Dict[str, Any]]] = None, count: int = 0) -> None:
        self.hits = hits or []
        self.total = count
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
    
    def search(self, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append(('search', kwargs))
        return {'hits': {'total': {'value': len(self.hits)}, 'hits': list(self.hits)}}
    
    def count(self, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append(('count', kwargs))
        return {'count': self.total}
    
    def index(self, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append(('index', kwargs))
        return {'result': 'created', '_id': kwargs.get('id') or 'generated'}


class RecordingReporter:
    """Query reporter keeping every reported event."""
    
    def __init__(self) -> None:
        self.events: List[Tuple[str, Dict[str, Any]]] = []
    
    def report(self, category: str, data: Dict[str, Any]) -> None:
        self.events.append((category, data))


class FakeClientFactory(ClientFactory):
    """Client factory handing out fake clients."""
    
    def __init__(self) -> None:
        self.created: List[ConnectionConfig] = []
    
    def create_client(self, config: ConnectionConfig) -> FakeElasticsearch:
        self.created.append(config)
        return FakeElasticsearch()




class FakeRedis:
    """Dictionary backed stand-in for ``redis.Redis`` storing bytes like the real client."""
    
    def __init__(self) -> None:
        self.data: Dict[str, bytes] = {}
        self.expirations: Dict[str, Optional[int]] = {}
    
    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)
    
    def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.data[key] = value.encode()
        self.expirations[key] = ex
        return True
    
    def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.data)
    
    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed
    
    def scan_iter(self, match: Optional[str] = None) -> Iterator[str]:
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key
