"""Aggregation layer - estadísticas por archivo."""

from .statistics_engine import StatisticsEngine, median

__all__ = ["StatisticsEngine", "median"]
