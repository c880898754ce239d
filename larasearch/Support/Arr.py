from __future__ import annotations

from typing import Any, List


class Arr:
    """Laravel-style array helpers."""
    
    @staticmethod
    def wrap(value: Any) -> List[Any]:
        """Wrap the given value in a list if it's not already a list or tuple."""
        if value is None:
            return []
        if isinstance(value, tuple):
            return list(value)
        return value if isinstance(value, list) else [value]
