from __future__ import annotations

from .QueryReporter import QueryReporter, NullQueryReporter, SentryQueryReporter

__all__ = ['QueryReporter', 'NullQueryReporter', 'SentryQueryReporter']
