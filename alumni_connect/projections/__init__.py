"""List projections.

- ``engine``: the pure ``project`` function and its filter/result types
- ``kinds``: per-kind bucketing, search and ordering settings
- ``sources``: the filtered store query behind each list view
"""

from .engine import ALL_TYPES, Projection, ProjectionFilters, project
from .kinds import SPECS, ProjectionKind, ProjectionSpec, get_spec
from .sources import ViewSource, view_sources

__all__ = [
    "ALL_TYPES",
    "SPECS",
    "Projection",
    "ProjectionFilters",
    "ProjectionKind",
    "ProjectionSpec",
    "ViewSource",
    "get_spec",
    "project",
    "view_sources",
]
