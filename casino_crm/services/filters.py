"""
Query predicate composition.

A listing predicate is ``(search OR-group) AND eq(...) AND eq(...)``, where
each part is only present when its parameter is. The free-text search is a
case-insensitive substring match on a fixed set of columns; the input is
matched literally (LIKE wildcards in it are escaped).
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import and_, asc, desc, or_

from casino_crm.core.errors import ValidationError

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _present(value: Any) -> bool:
    return value is not None and value != ""


def search_predicate(columns: Iterable, search: Optional[str]):
    if not _present(search):
        return None
    pattern = f"%{escape_like(search)}%"
    return or_(*[column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns])


def equality_predicates(columns: Mapping[str, Any], values: Mapping[str, Any]) -> List:
    """One ``column == value`` per parameter that is present and non-empty."""
    return [
        columns[name] == value
        for name, value in values.items()
        if name in columns and _present(value)
    ]


def compose(
    search_columns: Iterable,
    search: Optional[str],
    equality_columns: Mapping[str, Any],
    equalities: Mapping[str, Any],
):
    """AND of every applicable part, or None when nothing constrains the query."""
    parts = []
    searched = search_predicate(search_columns, search)
    if searched is not None:
        parts.append(searched)
    parts.extend(equality_predicates(equality_columns, equalities))
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return and_(*parts)


def sort_clause(
    sortable: Dict[str, Any], sort_by: Optional[str], sort_order: Optional[str], default: str
):
    column_name = sort_by or default
    if column_name not in sortable:
        raise ValidationError(f"Cannot sort by '{column_name}'")
    column = sortable[column_name]
    # Anything other than "asc" sorts descending
    return asc(column) if sort_order == "asc" else desc(column)
