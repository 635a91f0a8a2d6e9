"""Métricas de ingesta."""

from .ingestion_metrics import IngestionMetrics, IngestionMetricsService, get_ingestion_metrics

__all__ = ["IngestionMetrics", "IngestionMetricsService", "get_ingestion_metrics"]
