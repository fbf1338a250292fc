from __future__ import annotations

import math
from collections.abc import Sequence

from ..models.cell_value import CellKind, CellValue

"""SQL text generation.

Statements are built as literal MySQL text, one INSERT per row. Identifiers
are wrapped in backticks and string values in double quotes, both
interpolated verbatim: a backtick in a field name or a double quote in a cell
is NOT escaped. Callers needing hostile-input safety must sanitize upstream.
"""

__all__ = [
    "NULL_LITERAL",
    "build_delete_all",
    "build_insert",
    "build_show_tables",
    "quote_identifier",
    "render_value",
]

NULL_LITERAL = "null"


def quote_identifier(name: str) -> str:
    return f"`{name}`"


def _render_float(value: float) -> str:
    if not math.isfinite(value):
        return NULL_LITERAL
    if value.is_integer():
        return str(int(value))
    return repr(value)


def render_value(cell: CellValue) -> str:
    """Render one cell as a SQL literal.

    >>> render_value(CellValue.text("Tom"))
    '"Tom"'
    >>> render_value(CellValue.boolean(True))
    '1'
    """
    if cell.kind is CellKind.TEXT:
        return f'"{cell.value}"'
    if cell.kind is CellKind.BOOLEAN:
        return "1" if cell.value else "0"
    if cell.kind is CellKind.INTEGER:
        return str(cell.value)
    if cell.kind is CellKind.FLOAT:
        return _render_float(cell.value)
    return NULL_LITERAL


def build_insert(table_name: str, fields: Sequence[str], row: Sequence[CellValue]) -> str:
    """Build one INSERT statement.

    ``fields`` and ``row`` are assumed to be positionally aligned; nothing is
    checked here.

    >>> build_insert("T", ["id"], [CellValue.integer(1)])
    'INSERT INTO `T` (`id`) VALUES (1);'
    """
    cols_sql = ", ".join(quote_identifier(f) for f in fields)
    values_sql = ", ".join(render_value(v) for v in row)
    return f"INSERT INTO {quote_identifier(table_name)} ({cols_sql}) VALUES ({values_sql});"


def build_show_tables(table_name: str) -> str:
    return f'SHOW TABLES LIKE "{table_name}"'


def build_delete_all(table_name: str) -> str:
    return f"DELETE FROM {quote_identifier(table_name)};"
