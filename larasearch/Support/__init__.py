from __future__ import annotations

from .Arr import Arr

__all__ = ['Arr']
