"""CSV transport for measurement batch import."""

from .processor import CSVProcessor
from .endpoints import router as csv_router

__all__ = ["CSVProcessor", "csv_router"]
