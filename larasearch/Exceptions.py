from __future__ import annotations

from typing import Optional


class ScopeException(Exception):
    """Base exception for scope resolution errors."""
    pass


class UnknownScopeError(ScopeException):
    """Exception raised when a named scope is not defined on the model"""
    
    def __init__(self, scope: str, model: Optional[type] = None) -> None:
        self.scope = scope
        self.model = model
        
        model_name = model.__name__ if model is not None else 'model'
        
        super().__init__(
            f"Call to undefined scope `{scope}` on `{model_name}`."
        )


class BindingError(ScopeException):
    """Exception raised when a builder has no model to resolve scopes against"""
    
    def __init__(self, scope: str) -> None:
        self.scope = scope
        
        super().__init__(
            f"Cannot call named scope `{scope}`: the query is not bound to a model."
        )


class ConnectionNotConfiguredException(Exception):
    """Exception raised when a connection name has no configuration"""
    
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Elasticsearch connection `{name}` is not configured.")
