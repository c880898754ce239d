from __future__ import annotations

from typing import Any, Callable, Optional, Type, TYPE_CHECKING
from datetime import datetime

from .Scope import Scope

if TYPE_CHECKING:
    from larasearch.Query.Builder import Builder
    from larasearch.Models.Model import Model


class TermScope(Scope):
    """
    Global scope restricting a field to a single value.
    
    Usage:
        Product.add_global_scope(TermScope('status', 'active', name='active'))
        products = Product.query().get()  # Only active products
        
        # Bypass when needed
        everything = Product.query().without_global_scope('active').get()
    """
    
    def __init__(self, field: str, value: Any, name: Optional[str] = None):
        """
        Initialize the term scope.
        
        @param field: Document field to filter on
        @param value: Value the field must hold
        @param name: Scope name, defaults to 'term.<field>'
        """
        super().__init__(name or f'term.{field}')
        self.field = field
        self.value = value
    
    def apply(self, builder: Builder, model: Optional[Type[Model]]) -> None:
        """Apply the term filter to the query."""
        builder.where(self.field, self.value)


class TenantScope(Scope):
    """
    Global scope for multi-tenant indices.
    
    Filters every query to the documents of the current tenant. The tenant
    is resolved when the scope is applied, not when it is registered, so a
    single registration follows the request context.
    
    Usage:
        def current_tenant_id() -> int:
            return request_context.tenant_id
        
        Order.add_global_scope(TenantScope(current_tenant_id))
        orders = Order.query().get()  # Only current tenant's orders
    """
    
    def __init__(
        self,
        tenant_resolver: Callable[[], Any],
        field: str = 'tenant_id',
        name: Optional[str] = None
    ):
        """
        Initialize the tenant scope.
        
        @param tenant_resolver: Function that returns the current tenant ID
        @param field: Document field holding the tenant ID
        @param name: Scope name, defaults to 'tenant.<field>'
        """
        super().__init__(name or f'tenant.{field}')
        self.tenant_resolver = tenant_resolver
        self.field = field
    
    def apply(self, builder: Builder, model: Optional[Type[Model]]) -> None:
        """Apply the tenant filter when a tenant is resolved."""
        tenant = self.tenant_resolver()
        
        if tenant is not None:
            builder.where(self.field, tenant)


class DateRangeScope(Scope):
    """
    Global scope to filter documents by date range.
    
    Usage:
        Post.add_global_scope(
            DateRangeScope(start_date=datetime(2024, 1, 1), field='created_at')
        )
    """
    
    def __init__(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        field: str = 'created_at',
        name: Optional[str] = None
    ):
        super().__init__(name or f'date_range.{field}')
        self.start_date = start_date
        self.end_date = end_date
        self.field = field
    
    def apply(self, builder: Builder, model: Optional[Type[Model]]) -> None:
        """Apply the range filter to the query."""
        if self.start_date is None and self.end_date is None:
            return
        
        builder.where_between(
            self.field,
            self.start_date.isoformat() if self.start_date else None,
            self.end_date.isoformat() if self.end_date else None
        )


class SoftDeletingScope(Scope):
    """
    Laravel-style soft deleting scope for search indices.
    
    Excludes documents carrying a deletion timestamp. When registered, the
    scope adds two macros to the builder:
    
    - ``with_trashed()``: includes deleted and non-deleted documents
    - ``only_trashed()``: only includes deleted documents
    
    Usage:
        Article.add_global_scope(SoftDeletingScope())
        
        Article.query().get()                 # deleted_at is missing
        Article.query().with_trashed().get()  # everything
        Article.query().only_trashed().get()  # deleted_at exists
    """
    
    def __init__(self, field: str = 'deleted_at', name: Optional[str] = None):
        super().__init__(name or 'soft_deleting')
        self.field = field
    
    def apply(self, builder: Builder, model: Optional[Type[Model]]) -> None:
        """Exclude soft deleted documents."""
        builder.where_missing(self.field)
    
    def extend(self, builder: Builder) -> None:
        """Register the trashed macros on the builder."""
        builder.macro('with_trashed', self._with_trashed)
        builder.macro('only_trashed', self._only_trashed)
    
    def _with_trashed(self, builder: Builder) -> Builder:
        return builder.without_global_scope(self)
    
    def _only_trashed(self, builder: Builder) -> Builder:
        return builder.without_global_scope(self).where_exists(self.field)
