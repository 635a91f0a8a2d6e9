"""Query layer - filtros sobre resúmenes y lecturas recientes."""

from .filters import FilterClause, QueryFilterBuilder, SummaryFilters, matches_all
from .service import RECENT_RECORDS_LIMIT, SummaryQueryService

__all__ = [
    "FilterClause",
    "QueryFilterBuilder",
    "RECENT_RECORDS_LIMIT",
    "SummaryFilters",
    "SummaryQueryService",
    "matches_all",
]
