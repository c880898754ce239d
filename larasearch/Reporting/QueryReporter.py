from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable
import json

import sentry_sdk


@runtime_checkable
class QueryReporter(Protocol):
    """Side channel receiving outgoing search requests."""
    
    def report(self, category: str, data: Dict[str, Any]) -> None:
        ...


class NullQueryReporter:
    """Reporter discarding every event."""
    
    def report(self, category: str, data: Dict[str, Any]) -> None:
        pass


class SentryQueryReporter:
    """
    Records outgoing queries as Sentry breadcrumbs.
    
    The breadcrumb is attached to whatever event Sentry captures next, so an
    error report shows the search requests leading up to it. Nothing is
    recorded while the SDK is not initialized.
    """
    
    def __init__(self, level: str = 'info') -> None:
        self.level = level
    
    def report(self, category: str, data: Dict[str, Any]) -> None:
        if not sentry_sdk.is_initialized():
            return
        
        sentry_sdk.add_breadcrumb(
            category=category,
            message=json.dumps(data),
            level=self.level,
            data=data,
        )
