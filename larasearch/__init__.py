from __future__ import annotations

"""
Laravel-style Elasticsearch query builder with global and local query scopes.
"""

from .Exceptions import (
    ScopeException,
    UnknownScopeError,
    BindingError,
    ConnectionNotConfiguredException
)
from .Scopes import (
    Scope,
    ScopeInterface,
    AnonymousScope,
    ScopeRegistry,
    ScopeApplier,
    NamedScopeResolver,
    TermScope,
    TenantScope,
    DateRangeScope,
    SoftDeletingScope
)
from .Query import Builder
from .Models import Model, scope
from .Connection import Connection
from .ConnectionManager import (
    ConnectionManager,
    ConnectionConfig,
    ClientFactory,
    get_connection_manager,
    set_connection_manager
)

__all__ = [
    'ScopeException',
    'UnknownScopeError',
    'BindingError',
    'ConnectionNotConfiguredException',
    'Scope',
    'ScopeInterface',
    'AnonymousScope',
    'ScopeRegistry',
    'ScopeApplier',
    'NamedScopeResolver',
    'TermScope',
    'TenantScope',
    'DateRangeScope',
    'SoftDeletingScope',
    'Builder',
    'Model',
    'scope',
    'Connection',
    'ConnectionManager',
    'ConnectionConfig',
    'ClientFactory',
    'get_connection_manager',
    'set_connection_manager',
]
