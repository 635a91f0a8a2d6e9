"""Measurement ingest services: CSV batch ingestion and per-file summaries."""

__version__ = "0.1.0"
