"""
Data models and schemas.
"""

from .grid import (
    OSTN02_GEOMETRY,
    CellLocation,
    GridCorrection,
    GridGeometry,
    GridNodeRecord,
    SourceCoordinate,
    TargetCoordinate,
    VerticalDatum,
)

__all__ = [
    "OSTN02_GEOMETRY",
    "CellLocation",
    "GridCorrection",
    "GridGeometry",
    "GridNodeRecord",
    "SourceCoordinate",
    "TargetCoordinate",
    "VerticalDatum",
]
