"""Tests for the reusable global scopes."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from larasearch.Query.Builder import Builder
from larasearch.Scopes.CommonScopes import DateRangeScope, SoftDeletingScope, TenantScope, TermScope
from larasearch.Scopes.Scope import create_scope


class TestCommonScopes:
    """Test suite for TermScope, TenantScope and DateRangeScope."""
    
    def test_term_scope(self, builder: Builder) -> None:
        builder.with_global_scope('active', TermScope('status', 'active', name='active'))
        
        assert builder.apply_scopes().get_filters() == [{'term': {'status': 'active'}}]
    
    def test_tenant_scope_resolves_tenant_at_apply_time(self, builder: Builder) -> None:
        tenant: Optional[int] = None
        builder.with_global_scope('tenant', TenantScope(lambda: tenant))
        
        assert builder.apply_scopes().get_filters() == []
        
        tenant = 7
        assert builder.apply_scopes().get_filters() == [{'term': {'tenant_id': 7}}]
    
    def test_tenant_scope_removed_by_object(self, builder: Builder) -> None:
        scope = TenantScope(lambda: 1, field='org')
        builder.with_global_scope(scope.get_name(), scope)
        
        builder.without_global_scope(scope)
        
        assert builder.removed_scopes() == ('tenant.org',)
        assert builder.apply_scopes() is builder
    
    def test_date_range_scope(self, builder: Builder) -> None:
        scope = DateRangeScope(start_date=datetime(2024, 1, 1), field='published_at')
        builder.with_global_scope('recent', scope)
        
        assert builder.apply_scopes().get_filters() == [
            {'range': {'published_at': {'gte': '2024-01-01T00:00:00'}}}
        ]
    
    def test_open_date_range_adds_nothing(self, builder: Builder) -> None:
        builder.with_global_scope('any', DateRangeScope())
        
        assert builder.apply_scopes().get_filters() == []
    
    def test_create_scope_helper(self, builder: Builder) -> None:
        scope = create_scope(lambda query, model: query.where_exists('title'), name='titled')
        builder.with_global_scope('titled', scope)
        
        assert scope.get_name() == 'titled'
        assert builder.apply_scopes().get_filters() == [{'exists': {'field': 'title'}}]
    
    def test_scope_object_removed_under_its_registered_identifier(self, builder: Builder) -> None:
        tenant = TenantScope(lambda: 42)
        builder.with_global_scope('tenant', tenant)
        
        builder.without_global_scope(tenant)
        
        assert builder.removed_scopes() == ('tenant',)
        assert builder.apply_scopes().get_filters() == []
    
    def test_default_names_follow_the_field(self) -> None:
        assert TermScope('status', 'active').get_name() == 'term.status'
        assert TermScope('brand', 'acme').get_name() == 'term.brand'
        assert TenantScope(lambda: 1).get_name() == 'tenant.tenant_id'
        assert DateRangeScope(field='published_at').get_name() == 'date_range.published_at'


class TestSoftDeletingScope:
    """Trashed macros remove the scope whatever identifier it was registered under."""
    
    def test_with_trashed_under_custom_identifier(self, builder: Builder) -> None:
        builder.with_global_scope('soft', SoftDeletingScope())
        
        query = builder.with_trashed()
        
        assert query.removed_scopes() == ('soft',)
        assert query.apply_scopes().get_must_not() == []
    
    def test_only_trashed_under_custom_identifier(self, builder: Builder) -> None:
        builder.with_global_scope('soft', SoftDeletingScope(field='removed_at'))
        
        scoped = builder.only_trashed().apply_scopes()
        
        assert scoped.get_must_not() == []
        assert scoped.get_filters() == [{'exists': {'field': 'removed_at'}}]
