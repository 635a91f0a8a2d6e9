"""Validation layer - Validación de lotes."""

from .batch_validator import MAX_ROWS, MIN_ROWS, BatchValidationResult, BatchValidator

__all__ = ["BatchValidationResult", "BatchValidator", "MAX_ROWS", "MIN_ROWS"]
