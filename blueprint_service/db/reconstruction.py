"""
Fold flat blueprint rows back into nested aggregates.

Rows are ``(author, name, x, y, position_index)`` tuples, typically the result
of ``blueprints LEFT JOIN blueprint_points``. A header without points shows up
as a single row whose point columns are all NULL.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from blueprint_service.db import schemas

Row = Tuple[str, str, Optional[int], Optional[int], Optional[int]]


def _index_key(item: Tuple[Optional[int], schemas.Point]) -> int:
    index, _point = item
    return -1 if index is None else index


def fold_rows(rows: Iterable[Row]) -> List[schemas.Blueprint]:
    """Group rows by (author, name) in first-seen order.

    Points inside a group are ordered by ``position_index`` (stable, so rows
    that arrive already ordered keep their order) and a Point is only built
    when both coordinates are present.
    """
    groups: Dict[Tuple[str, str], List[Tuple[Optional[int], schemas.Point]]] = {}
    for author, name, x, y, position_index in rows:
        bucket = groups.setdefault((author, name), [])
        if x is not None and y is not None:
            bucket.append((position_index, schemas.Point(x=x, y=y)))

    blueprints = []
    for (author, name), indexed_points in groups.items():
        ordered = sorted(indexed_points, key=_index_key)
        blueprints.append(
            schemas.Blueprint(author=author, name=name, points=[point for _index, point in ordered])
        )
    return blueprints
