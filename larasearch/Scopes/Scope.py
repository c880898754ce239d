from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, Type, Union, runtime_checkable, TYPE_CHECKING
from abc import ABC, abstractmethod

if TYPE_CHECKING:
    from larasearch.Query.Builder import Builder
    from larasearch.Models.Model import Model


@runtime_checkable
class ScopeInterface(Protocol):
    """
    Laravel-style Scope interface for global query modifications.
    
    Global scopes allow automatic modification of all queries built for a
    model. Typical examples are soft deletes and multi-tenancy filters.
    """
    
    def apply(self, builder: Builder, model: Optional[Type[Model]]) -> None:
        """
        Apply the scope to a given search query builder.
        
        @param builder: The query builder instance, modified in place
        @param model: The model class the query was built for, if any
        """
        ...


ScopeCallable = Callable[['Builder'], Any]
GlobalScope = Union[ScopeInterface, ScopeCallable]


def is_scope_object(scope: Any) -> bool:
    """
    Determine whether a scope is an object scope rather than a callable.
    
    @param scope: The registered scope implementation
    @return: True if the scope exposes an ``apply`` method
    """
    return isinstance(scope, ScopeInterface)


class Scope(ABC):
    """
    Abstract base class for Laravel-style Global Scopes.
    
    Global scopes provide a convenient, consistent way to add constraints
    to all search queries for a given model. The scope mutates the builder
    it receives; return values are ignored.
    
    Usage:
        class PublishedScope(Scope):
            def apply(self, builder: Builder, model: Optional[Type[Model]]) -> None:
                builder.where('status', 'published')
        
        # Register on a model
        Post.add_global_scope('published', PublishedScope())
        
        # Every query built from the model is filtered
        posts = Post.query().get()
        
        # Bypass the scope for a single query
        drafts = Post.query().without_global_scope('published').get()
    """
    
    def __init__(self, name: Optional[str] = None):
        """
        Initialize the scope with an optional name.
        
        @param name: Identifier used when removing the scope by object
        """
        self.name = name or self.__class__.__name__
    
    @abstractmethod
    def apply(self, builder: Builder, model: Optional[Type[Model]]) -> None:
        """
        Apply the scope to a given query builder.
        
        @param builder: The query builder to modify
        @param model: The model class this scope applies to
        """
        pass
    
    def extend(self, builder: Builder) -> None:
        """
        Extend the query builder when the scope is registered.
        
        Scopes override this to attach macros that modify or bypass their
        own behaviour, for example ``with_trashed`` on a soft delete scope.
        
        @param builder: The query builder the scope was registered on
        """
        pass
    
    def get_name(self) -> str:
        """Get the scope's name."""
        return self.name
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}')>"


class AnonymousScope(Scope):
    """
    Anonymous scope for inline query modifications.
    
    Wraps a callable taking ``(builder, model)`` so it can be registered
    and removed like any other scope object.
    
    Usage:
        active = AnonymousScope(
            lambda builder, model: builder.where('active', True),
            name='active'
        )
        Account.add_global_scope('active', active)
    """
    
    def __init__(self, callback: Callable[[Builder, Optional[Type[Model]]], Any], name: Optional[str] = None):
        super().__init__(name or 'anonymous')
        self.callback = callback
    
    def apply(self, builder: Builder, model: Optional[Type[Model]]) -> None:
        """Apply the callback to modify the query."""
        self.callback(builder, model)


def create_scope(callback: Callable[[Builder, Optional[Type[Model]]], Any], name: Optional[str] = None) -> AnonymousScope:
    """
    Factory function to create an anonymous scope.
    
    @param callback: Function to apply scope modifications
    @param name: Optional name for the scope
    @return: Anonymous scope instance
    """
    return AnonymousScope(callback, name)
