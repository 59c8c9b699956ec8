"""Local storage of check statistics."""

from .statistics import StatisticsStore

__all__ = ["StatisticsStore"]
