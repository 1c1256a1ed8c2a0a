"""
Shared method registry for the pluggable coordinate schemes.

Usage
-----
    coordinate_methods = MethodRegistry("natural coordinate")
    coordinate_methods.register("sibson", compute_sibson_coordinates)
    fn = coordinate_methods["sibson"]
    coordinate_methods.available()  # ["sibson"]
"""

from typing import Callable


class MethodRegistry:
    """Registry for pluggable computational methods.

    Parameters
    ----------
    name : str
        Human-readable name for error messages (e.g., "natural coordinate").
    """

    def __init__(self, name: str):
        self.name = name
        self._methods: dict[str, Callable] = {}

    def register(self, key: str, fn: Callable) -> Callable:
        """Register ``fn`` under ``key``, replacing any earlier entry."""
        self._methods[key] = fn
        return fn

    def __getitem__(self, key: str) -> Callable:
        if key not in self._methods:
            raise KeyError(
                f"Unknown {self.name} method: {key!r}. "
                f"Available: {list(self._methods.keys())}"
            )
        return self._methods[key]

    def __contains__(self, key: str) -> bool:
        return key in self._methods

    def available(self) -> list[str]:
        """Return list of registered method names."""
        return list(self._methods.keys())
