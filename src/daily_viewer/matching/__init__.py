"""Date pattern matching for note basenames."""

from .matcher import DateKey, aggregate, match
from .pattern import DatePattern

__all__ = ["DateKey", "DatePattern", "aggregate", "match"]
