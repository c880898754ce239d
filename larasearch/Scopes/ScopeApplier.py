from __future__ import annotations

from typing import TYPE_CHECKING
import logging

from .Scope import is_scope_object

if TYPE_CHECKING:
    from larasearch.Query.Builder import Builder


logger = logging.getLogger(__name__)


class ScopeApplier:
    """
    Applies the global scopes registered on a builder.
    
    Application never touches the caller's builder: scopes run against a
    clone, so a base query can be reused for several independent searches.
    Registration order is fixed when application starts; a scope that
    removes a later scope from the clone prevents that scope from running.
    """
    
    @staticmethod
    def apply(builder: Builder) -> Builder:
        """
        Apply every registered scope to a copy of the builder.
        
        Exceptions raised by a scope propagate unchanged and the partially
        scoped copy is discarded.
        
        @param builder: The builder whose scopes should be applied
        @return: The builder itself when no scopes are registered, otherwise
                 a scoped clone
        """
        registry = builder.get_scope_registry()
        
        if not registry:
            return builder
        
        query = builder.clone()
        
        for identifier, scope in list(registry.items()):
            if identifier not in query.get_scope_registry():
                logger.debug(f"Skipping global scope '{identifier}' removed during application")
                continue
            
            if is_scope_object(scope):
                scope.apply(query, query.get_model())  # type: ignore[union-attr]
            else:
                scope(query)  # type: ignore[operator]
            
            logger.debug(f"Applied global scope '{identifier}'")
        
        return query
