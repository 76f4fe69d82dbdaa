from src.position_table.criteria import (
    FilterCriteria,
    compose_predicate,
    filter_positions,
)
from src.position_table.table_view import (
    InvalidSortKeyError,
    PositionTableController,
    TablePage,
    TableSummary,
    compare_values,
    sort_positions,
    summarize_rows,
    table_view,
)

__all__ = [
    "FilterCriteria",
    "InvalidSortKeyError",
    "PositionTableController",
    "TablePage",
    "TableSummary",
    "compare_values",
    "compose_predicate",
    "filter_positions",
    "sort_positions",
    "summarize_rows",
    "table_view",
]
