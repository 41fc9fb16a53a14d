"""Combinators - build one promise from the outcomes of many."""

from .ops import all_, async_, race

__all__ = ["race", "all_", "async_"]
