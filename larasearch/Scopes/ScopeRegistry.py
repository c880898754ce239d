from __future__ import annotations

from typing import Dict, ItemsView, Iterable, List, Optional, Tuple, TYPE_CHECKING
import logging

from .Scope import GlobalScope

if TYPE_CHECKING:
    from larasearch.Query.Builder import Builder


logger = logging.getLogger(__name__)


class ScopeRegistry:
    """
    Per-builder table of global scopes.
    
    Holds the scopes registered on a single query builder, keyed by
    identifier in registration order, along with a log of every identifier
    that was explicitly removed. Application order is insertion order;
    re-registering an identifier overwrites the previous scope in place.
    
    The removal log is informational only: an identifier is considered
    removed because it is absent from the table, and a removed identifier
    may be registered again at any time.
    
    Usage:
        registry = ScopeRegistry(builder)
        registry.register('tenant', lambda query: query.where('tenant_id', 42))
        registry.remove('tenant')
        registry.identifiers_removed()  # ('tenant',)
    """
    
    def __init__(self, builder: Builder) -> None:
        """
        Initialize an empty registry for a builder.
        
        @param builder: The builder owning this registry
        """
        self.builder = builder
        self.scopes: Dict[str, GlobalScope] = {}
        self.removed_scopes: List[str] = []
    
    def register(self, identifier: str, scope: GlobalScope) -> None:
        """
        Register a scope, replacing any scope with the same identifier.
        
        If the scope exposes an ``extend`` method it is invoked immediately
        with the owning builder.
        
        @param identifier: Unique name for the scope
        @param scope: Scope object or callable
        """
        self.scopes[identifier] = scope
        
        extend = getattr(scope, 'extend', None)
        if callable(extend):
            extend(self.builder)
        
        logger.debug(f"Registered global scope '{identifier}'")
    
    def remove(self, identifier: str) -> None:
        """
        Remove a scope and record the identifier in the removal log.
        
        Removing an identifier that is not registered only records it.
        
        @param identifier: Name of the scope to remove
        """
        self.scopes.pop(identifier, None)
        self.removed_scopes.append(identifier)
    
    def remove_all(self, identifiers: Optional[Iterable[str]] = None) -> None:
        """
        Remove several scopes at once.
        
        @param identifiers: Names to remove; all currently registered scopes
                            when omitted
        """
        if identifiers is None:
            identifiers = list(self.scopes.keys())
        
        for identifier in identifiers:
            self.remove(identifier)
    
    def identifiers_removed(self) -> Tuple[str, ...]:
        """
        Get every identifier removed so far, in removal order.
        
        @return: The removal log, duplicates included
        """
        return tuple(self.removed_scopes)
    
    def has(self, identifier: str) -> bool:
        return identifier in self.scopes
    
    def get(self, identifier: str) -> Optional[GlobalScope]:
        return self.scopes.get(identifier)
    
    def identifiers(self) -> List[str]:
        return list(self.scopes.keys())
    
    def items(self) -> ItemsView[str, GlobalScope]:
        return self.scopes.items()
    
    def copy(self, builder: Builder) -> ScopeRegistry:
        """
        Copy the registry for another builder.
        
        The table and the removal log are independent of the original; the
        scope implementations themselves are shared. ``extend`` is not
        invoked again.
        
        @param builder: The builder owning the copy
        @return: New registry instance
        """
        clone = ScopeRegistry(builder)
        clone.scopes = dict(self.scopes)
        clone.removed_scopes = list(self.removed_scopes)
        return clone
    
    def __contains__(self, identifier: object) -> bool:
        return identifier in self.scopes
    
    def __len__(self) -> int:
        return len(self.scopes)
    
    def __bool__(self) -> bool:
        return bool(self.scopes)
    
    def __repr__(self) -> str:
        return f"<ScopeRegistry(scopes={list(self.scopes)}, removed={self.removed_scopes})>"
