from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, Optional, Sequence, Union, overload, TYPE_CHECKING
from types import MethodType

from larasearch.Exceptions import UnknownScopeError
from larasearch.Scopes.Scope import GlobalScope

if TYPE_CHECKING:
    from larasearch.Connection import Connection
    from larasearch.Query.Builder import Builder


ScopeHandler = Callable[..., Any]


class NamedScope:
    """
    Marks a model method as a local scope.
    
    The wrapped function receives the model class, the builder and any
    parameters passed when the scope is called. Accessing the attribute on
    the class returns the function bound to that class, so scopes stay
    callable directly: ``Product.active(builder)``.
    """
    
    def __init__(self, func: ScopeHandler, name: Optional[str] = None) -> None:
        self.func = func
        self.name = name or func.__name__
        self.__doc__ = func.__doc__
    
    def __get__(self, instance: Any, owner: type) -> Callable[..., Any]:
        return MethodType(self.func, owner)


@overload
def scope(name_or_func: ScopeHandler) -> NamedScope: ...


@overload
def scope(name_or_func: Optional[str] = None) -> Callable[[ScopeHandler], NamedScope]: ...


def scope(name_or_func: Union[str, ScopeHandler, None] = None) -> Any:
    """
    Decorator registering a model method as a local scope.
    
    Usage:
        class Product(Model):
            @scope
            def active(cls, query):
                query.where('status', 'active')
            
            @scope('cheaper_than')
            def price_below(cls, query, price):
                query.where_between('price', end=price)
        
        Product.query().scopes(['active', {'cheaper_than': [100]}])
    """
    if callable(name_or_func):
        return NamedScope(name_or_func)
    
    def decorator(func: ScopeHandler) -> NamedScope:
        return NamedScope(func, name_or_func)
    
    return decorator


class Model:
    """
    Base class for searchable document types.
    
    A model names the index and connection its documents live in, holds the
    table of local scopes callable through ``Builder.scopes()`` and the
    global scopes registered on every query built from it.
    
    Local scope and global scope tables are inherited: each subclass starts
    with a copy of its parent's tables and may add to them without
    affecting the parent.
    
    Usage:
        class Order(Model):
            index = 'orders'
            
            @classmethod
            def booted(cls) -> None:
                cls.add_global_scope(TenantScope(current_tenant_id))
            
            @scope
            def shipped(cls, query):
                query.where('status', 'shipped')
        
        Order.query().scopes('shipped').get()
    """
    
    index: ClassVar[Optional[str]] = None
    connection: ClassVar[Optional[str]] = None
    
    __named_scopes__: ClassVar[Dict[str, ScopeHandler]] = {}
    __global_scopes__: ClassVar[Dict[str, GlobalScope]] = {}
    
    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Build the scope tables of the subclass and boot it."""
        super().__init_subclass__(**kwargs)
        
        cls.__named_scopes__ = dict(cls.__named_scopes__)
        cls.__global_scopes__ = dict(cls.__global_scopes__)
        
        for attribute in list(vars(cls).values()):
            if isinstance(attribute, NamedScope):
                cls.__named_scopes__[attribute.name] = attribute.func
        
        cls.booted()
    
    @classmethod
    def booted(cls) -> None:
        """Hook for registering global scopes once the class is created."""
        pass
    
    # Local scopes
    
    @classmethod
    def register_scope(cls, name: str, handler: ScopeHandler) -> None:
        """
        Register a local scope without the decorator.
        
        @param name: Scope name used with ``Builder.scopes()``
        @param handler: Function called as ``handler(model, builder, *parameters)``
        """
        cls.__named_scopes__[name] = handler
    
    @classmethod
    def has_named_scope(cls, name: str) -> bool:
        return name in cls.__named_scopes__
    
    @classmethod
    def call_named_scope(cls, name: str, parameters: Sequence[Any]) -> Any:
        """
        Call a local scope.
        
        @param name: Scope name
        @param parameters: Arguments, the builder first
        @return: Whatever the scope handler returns
        @raises UnknownScopeError: If the scope is not defined
        """
        handler = cls.__named_scopes__.get(name)
        
        if handler is None:
            raise UnknownScopeError(name, cls)
        
        return handler(cls, *parameters)
    
    # Global scopes
    
    @classmethod
    def add_global_scope(cls, scope: Union[str, Any], implementation: Optional[GlobalScope] = None) -> None:
        """
        Register a global scope on the model.
        
        Either ``add_global_scope('identifier', scope)`` or
        ``add_global_scope(scope_object)``, in which case the scope's name
        is the identifier.
        """
        if implementation is None:
            if isinstance(scope, str):
                raise TypeError(f"Global scope '{scope}' needs an implementation")
            cls.__global_scopes__[scope.get_name()] = scope
            return
        
        cls.__global_scopes__[scope] = implementation
    
    @classmethod
    def remove_global_scope(cls, identifier: str) -> None:
        cls.__global_scopes__.pop(identifier, None)
    
    @classmethod
    def has_global_scope(cls, identifier: str) -> bool:
        return identifier in cls.__global_scopes__
    
    @classmethod
    def get_global_scopes(cls) -> Dict[str, GlobalScope]:
        return dict(cls.__global_scopes__)
    
    # Querying
    
    @classmethod
    def resolve_connection(cls) -> Connection:
        """Get the connection configured for the model."""
        from larasearch.ConnectionManager import get_connection_manager
        
        return get_connection_manager().connection(cls.connection)
    
    @classmethod
    def new_query(cls, connection: Optional[Connection] = None) -> Builder:
        """
        Create a builder bound to the model with its global scopes registered.
        
        @param connection: Connection to use instead of the configured one
        @return: Fresh query builder
        """
        builder = (connection or cls.resolve_connection()).new_query()
        
        if cls.index:
            builder.index(cls.index)
        
        builder.set_model(cls)
        
        for identifier, global_scope in cls.__global_scopes__.items():
            builder.with_global_scope(identifier, global_scope)
        
        return builder
    
    @classmethod
    def query(cls) -> Builder:
        """Laravel-style entry point: ``Model.query()``."""
        return cls.new_query()
