"""List projection engine.

``project`` derives the buckets a list view shows from a raw collection:

- ``primary``: active rows that are still upcoming (or simply active, for
  kinds without a time dimension),
- ``secondary``: everything else,
- ``mine``: rows whose ``mine_field`` equals the viewer, independent of the
  time buckets.

Type and free-text filters apply before bucketing. The function is pure:
it reads the rows, never mutates them, and orders every bucket totally
(ties broken by ``id``), so two calls with the same inputs return the same
result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel

from .kinds import ProjectionKind, ProjectionSpec, get_spec

ALL_TYPES = "all"


@dataclass(frozen=True)
class ProjectionFilters:
    """Filters selected in a list view."""

    kind: ProjectionKind
    type: str = ALL_TYPES
    search: str = ""
    mine_field: Optional[str] = None


@dataclass(frozen=True)
class Projection:
    primary: Tuple[Any, ...] = ()
    secondary: Tuple[Any, ...] = ()
    mine: Tuple[Any, ...] = ()


def _field(entity: Any, name: str) -> Any:
    if isinstance(entity, Mapping):
        value = entity.get(name)
    else:
        value = getattr(entity, name, None)
    return value.value if isinstance(value, Enum) else value


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _sort_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, str):
        return value.casefold()
    return value


def _matches_type(entity: Any, spec: ProjectionSpec, wanted: str) -> bool:
    if not wanted or wanted == ALL_TYPES or spec.type_field is None:
        return True
    return _field(entity, spec.type_field) == wanted


def _matches_search(entity: Any, spec: ProjectionSpec, needle: str) -> bool:
    if not needle:
        return True
    for name in spec.search_fields:
        value = _field(entity, name)
        if value is not None and needle in str(value).casefold():
            return True
    return False


def _is_upcoming(entity: Any, spec: ProjectionSpec, now: datetime) -> bool:
    if not spec.is_active(_as_mapping(entity)):
        return False
    if spec.time_field is None:
        return True
    moment = _field(entity, spec.time_field)
    if moment is None:
        return spec.open_ended
    return _as_utc(moment) >= now


def _as_mapping(entity: Any) -> Mapping[str, Any]:
    if isinstance(entity, Mapping):
        return entity
    if isinstance(entity, BaseModel):
        return entity.model_dump()
    return vars(entity)


def _ordered(entities: Sequence[Any], field: str, ascending: bool) -> Tuple[Any, ...]:
    """Sort by ``field`` with missing values last, then by ``id``."""
    by_id = sorted(entities, key=lambda entity: str(_field(entity, "id")))
    present = [entity for entity in by_id if _field(entity, field) is not None]
    missing = [entity for entity in by_id if _field(entity, field) is None]
    # sorted() is stable with reverse=True, so the id order survives inside ties.
    present = sorted(present, key=lambda entity: _sort_value(_field(entity, field)), reverse=not ascending)
    return tuple(present + missing)


def project(
    entities: Iterable[Any],
    viewer_id: Optional[str],
    now: datetime,
    filters: ProjectionFilters,
) -> Projection:
    """Split ``entities`` into primary, secondary and mine buckets.

    Args:
        entities: Rows (mappings) or domain models of one kind
        viewer_id: Acting identity; ``None`` leaves ``mine`` empty
        now: Reference time; a row timed exactly at ``now`` is upcoming
        filters: Kind, type filter, search text and the "mine" field

    Returns:
        The three ordered buckets
    """
    spec = get_spec(filters.kind)
    reference = _as_utc(now)
    needle = filters.search.strip().casefold()

    selected = [
        entity
        for entity in entities
        if _matches_type(entity, spec, filters.type) and _matches_search(entity, spec, needle)
    ]

    primary: List[Any] = []
    secondary: List[Any] = []
    for entity in selected:
        (primary if _is_upcoming(entity, spec, reference) else secondary).append(entity)

    mine: List[Any] = []
    if filters.mine_field and viewer_id:
        mine = [entity for entity in selected if _field(entity, filters.mine_field) == viewer_id]

    return Projection(
        primary=_ordered(primary, spec.order_field, spec.primary_ascending),
        secondary=_ordered(secondary, spec.order_field, spec.secondary_ascending),
        mine=_ordered(mine, spec.order_field, spec.secondary_ascending),
    )
