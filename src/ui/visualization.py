"""Chart and table helpers for query results.

Pure functions that turn :class:`TabularData` into the structures the chat
page hands to NiceGUI (``ui.table`` rows and ECharts options).
"""

import csv
import io
from typing import Any

from src.models.schemas import TabularData, Visualization

PIE_MAX_ROWS = 5
TABLE_MIN_ROWS = 20
PIE_SLICE_LIMIT = 10

CHART_COLORS = ["#0ea5e9", "#8b5cf6", "#ec4899", "#f59e0b", "#10b981", "#ef4444", "#6366f1"]


def resolve_visualization(
    data: TabularData, hint: Visualization | None = None
) -> Visualization:
    """Pick the chart type for a result.

    The service hint wins. Otherwise small two-column results become a pie,
    large results a table and everything else a bar chart.
    """
    if hint is not None:
        return hint
    if len(data.rows) <= PIE_MAX_ROWS and len(data.columns) == 2:
        return Visualization.PIE
    if len(data.rows) > TABLE_MIN_ROWS:
        return Visualization.TABLE
    return Visualization.BAR


def table_columns(data: TabularData) -> list[dict[str, Any]]:
    return [
        {"name": str(i), "label": column, "field": str(i), "align": "left", "sortable": True}
        for i, column in enumerate(data.columns)
    ]


def table_rows(data: TabularData) -> list[dict[str, Any]]:
    """Key each cell by its column index, padding short rows with None."""
    width = len(data.columns)
    return [
        {str(i): (row[i] if i < len(row) else None) for i in range(width)}
        for row in data.rows
    ]


def to_csv(data: TabularData) -> str:
    """Render a result as CSV with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(data.columns)
    writer.writerows(data.rows)
    return buffer.getvalue()


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _category(row: list[Any], index: int) -> str:
    if row and row[0] not in (None, ""):
        return str(row[0])
    return f"Item {index + 1}"


def chart_options(data: TabularData, kind: Visualization) -> dict[str, Any] | None:
    """Build ECharts options for a chart type.

    Returns:
        The options dict, or None for tables and results without columns.
    """
    if kind == Visualization.TABLE or not data.columns:
        return None

    if kind == Visualization.PIE:
        slices = [
            {
                "name": _category(row, i),
                "value": _number(row[1]) if len(row) > 1 else 0.0,
            }
            for i, row in enumerate(data.rows[:PIE_SLICE_LIMIT])
        ]
        return {
            "color": CHART_COLORS,
            "tooltip": {"trigger": "item"},
            "legend": {"bottom": 0},
            "series": [{"type": "pie", "radius": "65%", "data": slices}],
        }

    # Bar and line: first column is the category axis, the rest are series
    value_columns = list(range(1, len(data.columns))) or [0]
    return {
        "color": CHART_COLORS,
        "tooltip": {"trigger": "axis"},
        "legend": {"bottom": 0},
        "xAxis": {
            "type": "category",
            "data": [_category(row, i) for i, row in enumerate(data.rows)],
        },
        "yAxis": {"type": "value"},
        "series": [
            {
                "name": data.columns[col],
                "type": kind.value,
                "data": [_number(row[col]) if col < len(row) else 0.0 for row in data.rows],
            }
            for col in value_columns
        ],
    }
