from __future__ import annotations

from .Builder import Builder

__all__ = ['Builder']
