from __future__ import annotations

"""
Laravel-style query scopes for search builders.

Classes:
- ScopeInterface: Protocol for scope objects
- Scope: Abstract base class for custom global scopes
- AnonymousScope: For inline scope definitions
- ScopeRegistry: Per-builder table of global scopes
- ScopeApplier: Applies global scopes to a copy of a builder
- NamedScopeResolver: Calls local scopes defined on a model

Common Scopes:
- TermScope: Restrict a field to a value
- TenantScope: Multi-tenant filtering
- DateRangeScope: Filter by date ranges
- SoftDeletingScope: Exclude soft deleted documents
"""

from .Scope import (
    Scope,
    ScopeInterface,
    AnonymousScope,
    GlobalScope,
    ScopeCallable,
    create_scope,
    is_scope_object
)
from .ScopeRegistry import ScopeRegistry
from .ScopeApplier import ScopeApplier
from .NamedScopeResolver import NamedScopeResolver, ScopeSelector
from .CommonScopes import (
    TermScope,
    TenantScope,
    DateRangeScope,
    SoftDeletingScope
)

__all__ = [
    'Scope',
    'ScopeInterface',
    'AnonymousScope',
    'GlobalScope',
    'ScopeCallable',
    'create_scope',
    'is_scope_object',
    'ScopeRegistry',
    'ScopeApplier',
    'NamedScopeResolver',
    'ScopeSelector',
    'TermScope',
    'TenantScope',
    'DateRangeScope',
    'SoftDeletingScope',
]
