from __future__ import annotations

from typing import Any, List, Mapping, Sequence, Tuple, Union, TYPE_CHECKING

from larasearch.Exceptions import BindingError, UnknownScopeError
from larasearch.Support.Arr import Arr

if TYPE_CHECKING:
    from larasearch.Query.Builder import Builder


ScopeSelector = Union[str, Sequence[Union[str, Mapping[str, Any]]], Mapping[str, Any]]


class NamedScopeResolver:
    """
    Resolves local scopes defined on a model and calls them on a builder.
    
    Local scopes are looked up in the model's named scope table. Unlike
    global scope application, local scopes operate directly on the builder
    they are called on.
    """
    
    @staticmethod
    def call_named(builder: Builder, name: str, parameters: Sequence[Any] = ()) -> Builder:
        """
        Call a single named scope.
        
        Args:
            builder: The builder to modify
            name: Scope name as registered on the model
            parameters: Extra positional arguments passed after the builder
            
        Returns:
            The same builder instance
            
        Raises:
            BindingError: If the builder is not bound to a model
            UnknownScopeError: If the model does not define the scope
        """
        model = builder.get_model()
        
        if model is None:
            raise BindingError(name)
        
        if not model.has_named_scope(name):
            raise UnknownScopeError(name, model)
        
        model.call_named_scope(name, [builder, *parameters])
        
        return builder
    
    @staticmethod
    def scopes(builder: Builder, selector: ScopeSelector) -> Builder:
        """
        Call several named scopes in the order given.
        
        Args:
            builder: The builder to modify
            selector: A scope name, a mapping of scope name to its
                parameters, or a sequence mixing names and such mappings
            
        Returns:
            The builder after every scope has been applied
        """
        query = builder
        
        for name, parameters in NamedScopeResolver._normalize(selector):
            query = NamedScopeResolver.call_named(query, name, parameters)
        
        return query
    
    @staticmethod
    def _normalize(selector: ScopeSelector) -> List[Tuple[str, List[Any]]]:
        """Turn a scope selector into ``(name, parameters)`` pairs."""
        if isinstance(selector, Mapping):
            return [(name, Arr.wrap(parameters)) for name, parameters in selector.items()]
        
        entries: List[Tuple[str, List[Any]]] = []
        
        for item in Arr.wrap(selector):
            if isinstance(item, Mapping):
                entries.extend(NamedScopeResolver._normalize(item))
            else:
                entries.append((item, []))
        
        return entries
