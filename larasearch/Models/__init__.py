from __future__ import annotations

from .Model import Model, NamedScope, scope

__all__ = ['Model', 'NamedScope', 'scope']
