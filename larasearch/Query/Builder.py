from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union, TYPE_CHECKING
from functools import partial
import copy
import hashlib
import json
import logging

from larasearch.Scopes.Scope import GlobalScope
from larasearch.Scopes.ScopeRegistry import ScopeRegistry
from larasearch.Scopes.ScopeApplier import ScopeApplier
from larasearch.Scopes.NamedScopeResolver import NamedScopeResolver, ScopeSelector

if TYPE_CHECKING:
    from larasearch.Connection import Connection
    from larasearch.Models.Model import Model


logger = logging.getLogger(__name__)


class Builder:
    """
    Fluent search query builder with Laravel-style query scopes.
    
    Collects filters, sorting and paging for a single index and carries the
    global scopes that will be applied right before the query is sent.
    Scopes never modify the builder they were registered on: execution
    works on a scoped copy, so a base builder can be reused freely.
    
    Usage:
        base = connection.new_query().with_global_scope(
            'tenant', lambda query: query.where('tenant_id', 42)
        )
        
        recent = base.clone().order_by('created_at', 'desc').take(10).get()
        unscoped = base.clone().without_global_scope('tenant').count()
    """
    
    def __init__(
        self,
        connection: Optional[Connection] = None,
        model: Optional[Type[Model]] = None,
        index: Optional[str] = None
    ) -> None:
        self.connection = connection
        self.model: Optional[Type[Model]] = None
        
        # Query state
        self._index: Optional[str] = index
        self._filters: List[Dict[str, Any]] = []
        self._must: List[Dict[str, Any]] = []
        self._must_not: List[Dict[str, Any]] = []
        self._sort: List[Dict[str, Any]] = []
        self._size: Optional[int] = None
        self._from: Optional[int] = None
        
        # Result caching
        self._remember = False
        self._cache_ttl: Optional[int] = None
        self._cache_key: Optional[str] = None
        
        self._macros: Dict[str, Callable[..., Any]] = {}
        self._scope_registry = ScopeRegistry(self)
        
        if model is not None:
            self.set_model(model)
    
    # Model binding
    
    def set_model(self, model: Type[Model]) -> Builder:
        """
        Bind the builder to a model class for named scope resolution.
        
        The model's index is used unless an index was already chosen.
        """
        self.model = model
        
        if self._index is None and getattr(model, 'index', None):
            self._index = model.index
        
        return self
    
    def get_model(self) -> Optional[Type[Model]]:
        return self.model
    
    def get_connection(self) -> Connection:
        """Get the connection this builder executes on, resolving it if unset."""
        if self.connection is None:
            from larasearch.ConnectionManager import get_connection_manager
            
            name = getattr(self.model, 'connection', None) if self.model else None
            self.connection = get_connection_manager().connection(name)
        
        return self.connection
    
    def get_scope_registry(self) -> ScopeRegistry:
        return self._scope_registry
    
    # Global scopes
    
    def with_global_scope(self, identifier: str, scope: GlobalScope) -> Builder:
        """
        Register a new global scope.
        
        Args:
            identifier: Unique name; registering it again replaces the scope
            scope: Callable taking the builder, or an object with
                ``apply(builder, model)``
            
        Returns:
            Builder instance for method chaining
        """
        self._scope_registry.register(identifier, scope)
        return self
    
    def without_global_scope(self, scope: Union[str, Any]) -> Builder:
        """
        Remove a registered global scope.
        
        Args:
            scope: Scope identifier, or a registered scope object; an
                object that is not registered falls back to its ``name``
            
        Returns:
            Builder instance for method chaining
        """
        self._scope_registry.remove(self._scope_identifier(scope))
        return self
    
    def without_global_scopes(self, scopes: Optional[Iterable[Union[str, Any]]] = None) -> Builder:
        """
        Remove all or the given global scopes.
        
        Args:
            scopes: Identifiers or scope objects; every scope registered at
                call time when omitted
            
        Returns:
            Builder instance for method chaining
        """
        identifiers = None if scopes is None else [self._scope_identifier(scope) for scope in scopes]
        self._scope_registry.remove_all(identifiers)
        return self
    
    def removed_scopes(self) -> Tuple[str, ...]:
        """Get the identifiers of global scopes removed from this query."""
        return self._scope_registry.identifiers_removed()
    
    def apply_scopes(self) -> Builder:
        """
        Apply the global scopes and return the scoped query.
        
        Called by the execution methods right before the request is built;
        application code normally does not need to call it.
        """
        return ScopeApplier.apply(self)
    
    # Local scopes
    
    def has_named_scope(self, name: str) -> bool:
        """Determine if the bound model defines the given local scope."""
        return self.model is not None and self.model.has_named_scope(name)
    
    def scopes(self, scopes: ScopeSelector) -> Builder:
        """
        Call the given local model scopes.
        
        Args:
            scopes: A scope name, a mapping of scope name to its
                parameters, or a list mixing names and such mappings
            
        Returns:
            Builder instance for method chaining
        """
        return NamedScopeResolver.scopes(self, scopes)
    
    def scope(self, name: str, *parameters: Any) -> Builder:
        """Call a single local model scope with positional parameters."""
        return NamedScopeResolver.call_named(self, name, parameters)
    
    # Macros
    
    def macro(self, name: str, callback: Callable[..., Any]) -> Builder:
        """
        Register a builder macro.
        
        The callback receives the builder followed by the call arguments and
        is reachable as ``builder.<name>(...)``.
        """
        self._macros[name] = callback
        return self
    
    def has_macro(self, name: str) -> bool:
        return name in self._macros
    
    def __getattr__(self, name: str) -> Any:
        macros = self.__dict__.get('_macros') or {}
        
        if name in macros:
            return partial(macros[name], self)
        
        raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")
    
    # Query state
    
    def index(self, index: Optional[str]) -> Builder:
        """Set the index to search."""
        self._index = index
        return self
    
    def get_index(self) -> Optional[str]:
        return self._index
    
    def where(self, field: str, value: Any) -> Builder:
        """Add a term filter."""
        self._filters.append({'term': {field: value}})
        return self
    
    def where_in(self, field: str, values: Iterable[Any]) -> Builder:
        """Add a terms filter."""
        self._filters.append({'terms': {field: list(values)}})
        return self
    
    def where_not(self, field: str, value: Any) -> Builder:
        """Exclude documents where the field holds the value."""
        self._must_not.append({'term': {field: value}})
        return self
    
    def where_between(self, field: str, start: Any = None, end: Any = None) -> Builder:
        """Add an inclusive range filter; a ``None`` bound is left open."""
        bounds = {key: value for key, value in (('gte', start), ('lte', end)) if value is not None}
        self._filters.append({'range': {field: bounds}})
        return self
    
    def where_exists(self, field: str) -> Builder:
        self._filters.append({'exists': {'field': field}})
        return self
    
    def where_missing(self, field: str) -> Builder:
        self._must_not.append({'exists': {'field': field}})
        return self
    
    def search(self, text: str, fields: Optional[List[str]] = None) -> Builder:
        """Add a full-text query_string clause."""
        clause: Dict[str, Any] = {'query': text}
        if fields:
            clause['fields'] = list(fields)
        self._must.append({'query_string': clause})
        return self
    
    def order_by(self, field: str, direction: str = 'asc') -> Builder:
        self._sort.append({field: {'order': direction.lower()}})
        return self
    
    def take(self, limit: int) -> Builder:
        self._size = limit
        return self
    
    def skip(self, offset: int) -> Builder:
        self._from = offset
        return self
    
    def remember(self, ttl: Optional[int], key: Optional[str] = None) -> Builder:
        """
        Cache the raw response in the connection's cache store.
        
        Args:
            ttl: Seconds to keep the response, ``None`` for no expiry
            key: Cache key; derived from the request when omitted
        """
        self._cache_ttl = ttl
        self._cache_key = key
        self._remember = True
        return self
    
    def get_filters(self) -> List[Dict[str, Any]]:
        return self._filters
    
    def get_must_not(self) -> List[Dict[str, Any]]:
        return self._must_not
    
    def to_dsl(self) -> Dict[str, Any]:
        """Build the search request body from the builder state."""
        body: Dict[str, Any] = {'query': self._build_query()}
        
        if self._sort:
            body['sort'] = self._sort
        if self._size is not None:
            body['size'] = self._size
        if self._from is not None:
            body['from'] = self._from
        
        return body
    
    def _build_query(self) -> Dict[str, Any]:
        clauses = {
            'must': self._must,
            'filter': self._filters,
            'must_not': self._must_not,
        }
        clauses = {key: value for key, value in clauses.items() if value}
        
        if not clauses:
            return {'match_all': {}}
        
        return {'bool': clauses}
    
    # Execution methods
    
    def raw(self) -> Dict[str, Any]:
        """
        Execute the search and return the raw response.
        
        Global scopes are applied once, on a copy of this builder.
        """
        query = self.apply_scopes()
        return query._run_search()
    
    def get(self) -> List[Dict[str, Any]]:
        """Execute the search and return the hits."""
        response = self.raw()
        return response.get('hits', {}).get('hits', [])
    
    def first(self) -> Optional[Dict[str, Any]]:
        """Get the first hit, or None."""
        query = self.clone().take(1)
        
        if query._cache_key is not None:
            query._cache_key = f"{query._cache_key}:first"
        
        hits = query.get()
        return hits[0] if hits else None
    
    def count(self) -> int:
        """Count the documents matching the scoped query."""
        query = self.apply_scopes()
        response = query.get_connection().count(query._index, {'query': query._build_query()})
        return int(response.get('count', 0))
    
    def _run_search(self) -> Dict[str, Any]:
        connection = self.get_connection()
        body = self.to_dsl()
        
        if not self._remember or connection.get_cache() is None:
            return connection.search(self._index, body)
        
        cache = connection.get_cache()
        key = self._cache_key or self._make_cache_key(body)
        
        if cache.has(key):
            logger.debug(f"Serving search on '{self._index}' from cache key '{key}'")
            return cache.get(key)
        
        response = connection.search(self._index, body)
        cache.put(key, response, self._cache_ttl)
        return response
    
    def _make_cache_key(self, body: Dict[str, Any]) -> str:
        payload = json.dumps({'index': self._index, 'body': body}, sort_keys=True, default=str)
        return 'larasearch:' + hashlib.md5(payload.encode()).hexdigest()
    
    # Copying
    
    def clone(self) -> Builder:
        """
        Create an independent copy of this builder.
        
        Query state, macros and the scope table are copied; the connection
        and the model are shared.
        """
        clone = self.__class__(self.connection, index=self._index)
        clone.model = self.model
        clone._filters = copy.deepcopy(self._filters)
        clone._must = copy.deepcopy(self._must)
        clone._must_not = copy.deepcopy(self._must_not)
        clone._sort = copy.deepcopy(self._sort)
        clone._size = self._size
        clone._from = self._from
        clone._cache_ttl = self._cache_ttl
        clone._cache_key = self._cache_key
        clone._remember = self._remember
        clone._macros = dict(self._macros)
        clone._scope_registry = self._scope_registry.copy(clone)
        return clone
    
    def __copy__(self) -> Builder:
        return self.clone()
    
    def _scope_identifier(self, scope: Union[str, Any]) -> str:
        if isinstance(scope, str):
            return scope
        
        for identifier, registered in self._scope_registry.items():
            if registered is scope:
                return identifier
        
        name = getattr(scope, 'name', None)
        if not isinstance(name, str):
            raise TypeError(f"Cannot remove scope {scope!r}: it is not registered and has no name")
        
        return name
    
    def __repr__(self) -> str:
        return f"<Builder(index={self._index!r}, scopes={self._scope_registry.identifiers()})>"
