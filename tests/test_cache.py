"""Tests for cache stores and cached search responses."""

from __future__ import annotations

import importlib

import pytest
import redis

from larasearch.Cache.CacheStore import ArrayCacheStore, RedisCacheStore
from larasearch.Connection import Connection

from tests.fakes import FakeElasticsearch, FakeRedis, RecordingReporter

cache_module = importlib.import_module('larasearch.Cache.CacheStore')


class TestArrayCacheStore:
    """Test suite for ArrayCacheStore."""
    
    @pytest.fixture
    def cache(self) -> ArrayCacheStore:
        return ArrayCacheStore()
    
    def test_put_and_get(self, cache: ArrayCacheStore) -> None:
        cache.put('key', {'value': 1})
        
        assert cache.has('key')
        assert cache.get('key') == {'value': 1}
    
    def test_missing_key_returns_default(self, cache: ArrayCacheStore) -> None:
        assert cache.get('missing', 'default') == 'default'
        assert not cache.has('missing')
    
    def test_expired_items_are_gone(self, cache: ArrayCacheStore, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cache_module.time, 'time', lambda: 1000.0)
        cache.put('key', 'value', ttl=10)
        
        monkeypatch.setattr(cache_module.time, 'time', lambda: 1011.0)
        
        assert not cache.has('key')
        assert cache.get('key') is None
    
    def test_forget_and_flush(self, cache: ArrayCacheStore) -> None:
        cache.set('a', 1)
        cache.set('b', 2)
        
        assert cache.forget('a')
        assert not cache.forget('a')
        
        cache.flush()
        assert not cache.has('b')
    
    def test_remember_calls_callback_once(self, cache: ArrayCacheStore) -> None:
        calls = []
        
        def compute() -> int:
            calls.append(1)
            return 42
        
        assert cache.remember('answer', None, compute) == 42
        assert cache.remember('answer', None, compute) == 42
        assert len(calls) == 1


class TestRedisCacheStore:
    """Test suite for RedisCacheStore against an in-memory Redis client."""
    
    @pytest.fixture
    def redis_client(self) -> FakeRedis:
        return FakeRedis()
    
    @pytest.fixture
    def cache(self, redis_client: FakeRedis) -> RedisCacheStore:
        return RedisCacheStore(prefix='search:', client=redis_client)
    
    def test_values_are_stored_as_json_under_prefix(self, cache: RedisCacheStore, redis_client: FakeRedis) -> None:
        cache.put('hits', {'hits': {'hits': [{'_id': '1'}]}}, ttl=30)
        
        assert redis_client.data['search:hits'] == b'{"hits": {"hits": [{"_id": "1"}]}}'
        assert cache.get('hits') == {'hits': {'hits': [{'_id': '1'}]}}
    
    def test_ttl_is_passed_as_expiry(self, cache: RedisCacheStore, redis_client: FakeRedis) -> None:
        cache.put('short', 1, ttl=30)
        cache.put('forever', 2)
        
        assert redis_client.expirations == {'search:short': 30, 'search:forever': None}
    
    def test_missing_key_returns_default(self, cache: RedisCacheStore) -> None:
        assert cache.get('missing', 'default') == 'default'
        assert not cache.has('missing')
    
    def test_has_and_forget(self, cache: RedisCacheStore) -> None:
        cache.put('key', 'value')
        
        assert cache.has('key')
        assert cache.forget('key')
        assert not cache.forget('key')
        assert not cache.has('key')
    
    def test_flush_only_removes_prefixed_keys(self, cache: RedisCacheStore, redis_client: FakeRedis) -> None:
        cache.put('a', 1)
        cache.put('b', 2)
        redis_client.set('other:c', '3')
        
        assert cache.flush()
        assert list(redis_client.data) == ['other:c']
    
    def test_remember_uses_stored_value(self, cache: RedisCacheStore) -> None:
        cache.put('answer', 42)
        
        assert cache.remember('answer', 60, lambda: 0) == 42
    
    def test_builds_client_from_url(self) -> None:
        cache = RedisCacheStore('redis://cache.internal:6380/2')
        
        assert isinstance(cache.client, redis.Redis)
        assert cache.client.connection_pool.connection_kwargs['host'] == 'cache.internal'
        assert cache.client.connection_pool.connection_kwargs['port'] == 6380
        assert cache.client.connection_pool.connection_kwargs['db'] == 2


class TestRememberedSearches:
    """Builders can cache raw responses in the connection's cache."""
    
    @pytest.fixture
    def cached_connection(self, client: FakeElasticsearch) -> Connection:
        return Connection(client, cache=ArrayCacheStore(), index='documents', reporter=RecordingReporter())
    
    def test_remember_serves_second_call_from_cache(self, cached_connection: Connection, client: FakeElasticsearch) -> None:
        query = cached_connection.where('status', 'active').remember(60)
        
        first = query.get()
        second = query.get()
        
        assert first == second == client.hits
        assert len(client.calls) == 1
    
    def test_explicit_cache_key(self, cached_connection: Connection) -> None:
        cached_connection.new_query().remember(None, 'all-documents').get()
        
        assert cached_connection.get_cache().has('all-documents')
    
    def test_cache_key_includes_global_scopes(self, cached_connection: Connection, client: FakeElasticsearch) -> None:
        base = cached_connection.new_query().remember(60)
        
        base.clone().with_global_scope('tenant', lambda q: q.where('tenant', 1)).get()
        base.clone().with_global_scope('tenant', lambda q: q.where('tenant', 2)).get()
        
        assert len(client.calls) == 2
    
    def test_without_remember_cache_is_not_used(self, cached_connection: Connection, client: FakeElasticsearch) -> None:
        cached_connection.new_query().get()
        cached_connection.new_query().get()
        
        assert len(client.calls) == 2
    
    def test_remember_without_cache_store_queries_every_time(self, connection: Connection, client: FakeElasticsearch) -> None:
        query = connection.new_query().remember(60)
        
        query.get()
        query.get()
        
        assert len(client.calls) == 2
    
    def test_first_does_not_share_explicit_key_with_get(self, cached_connection: Connection, client: FakeElasticsearch) -> None:
        client.hits = [{'_id': '1'}, {'_id': '2'}]
        query = cached_connection.new_query().remember(60, 'listing')
        
        assert query.first() == {'_id': '1'}
        assert query.get() == [{'_id': '1'}, {'_id': '2'}]
        
        cache = cached_connection.get_cache()
        assert cache.has('listing:first')
        assert cache.has('listing')
        assert len(client.calls) == 2
