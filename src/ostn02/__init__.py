"""
ostn02 - ETRS89 to OSGB36/ODN transformation with the OSTN02/OSGM02 grid.

This package converts ETRS89 positions to OSGB36 National Grid
coordinates and orthometric heights by bilinear interpolation of the
Ordnance Survey 1 km correction grid.
"""

__version__ = "0.1.0"

from ostn02.core.errors import (
    MalformedRecordError,
    OSTN02Exception,
    OutOfRangeError,
    RecordNotFoundError,
)
from ostn02.core.grid import GridService, IndexedRecordSource, StreamingRecordSource
from ostn02.core.transform import OSTN02Transformer, transform_etrs89_grid
from ostn02.models.grid import SourceCoordinate, TargetCoordinate, VerticalDatum

__all__ = [
    "__version__",
    "GridService",
    "IndexedRecordSource",
    "MalformedRecordError",
    "OSTN02Exception",
    "OSTN02Transformer",
    "OutOfRangeError",
    "RecordNotFoundError",
    "SourceCoordinate",
    "StreamingRecordSource",
    "TargetCoordinate",
    "VerticalDatum",
    "transform_etrs89_grid",
]
