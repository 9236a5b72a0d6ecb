"""
Data models for the OSTN02/OSGM02 correction grid.

This module defines the grid node record, the fixed grid geometry and
the coordinate types that flow through the transformation.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple


class VerticalDatum(IntEnum):
    """OSGM02 geoid-datum region codes carried by each grid node."""

    OUTSIDE_MODEL_BOUNDARY = 0
    NEWLYN_GB = 1  # Ordnance Datum Newlyn, mainland
    ST_MARYS = 2
    DOUGLAS_02 = 3
    STORNOWAY = 4
    ST_KILDA = 5
    LERWICK = 6
    NEWLYN_ORKNEY = 7
    FAIR_ISLE = 8
    FLANNAN_ISLES = 9
    NORTH_RONA = 10
    SULE_SKERRY = 11
    FOULA = 12
    MALIN_HEAD = 13
    BELFAST = 14


@dataclass(frozen=True)
class GridGeometry:
    """
    Fixed layout of the correction grid.

    Attributes:
        cell_size: Node spacing in metres (both axes)
        row_width: Number of nodes in one west-east row
        row_count: Number of rows south to north
    """

    cell_size: float = 1000.0
    row_width: int = 701
    row_count: int = 1251

    @property
    def node_count(self) -> int:
        """Total number of nodes in the grid rectangle."""
        return self.row_width * self.row_count

    def node_id(self, east_index: int, north_index: int) -> int:
        """Node id for grid indices (1-based, row-major from the south-west)."""
        return east_index + north_index * self.row_width + 1


OSTN02_GEOMETRY = GridGeometry()


@dataclass(frozen=True)
class GridNodeRecord:
    """
    One node of the correction grid.

    Attributes:
        node_id: Dense 1-based node identifier
        shift_east: Easting shift to OSGB36 in metres
        shift_north: Northing shift to OSGB36 in metres
        geoid_undulation: Geoid height above GRS80 in metres
        vertical_datum: Geoid-datum region of the node
    """

    node_id: int
    shift_east: float
    shift_north: float
    geoid_undulation: float
    vertical_datum: VerticalDatum

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "node_id": self.node_id,
            "shift_east": self.shift_east,
            "shift_north": self.shift_north,
            "geoid_undulation": self.geoid_undulation,
            "vertical_datum": self.vertical_datum.name,
        }


@dataclass(frozen=True)
class CellLocation:
    """
    Position of a coordinate within its enclosing grid cell.

    Corner ids are ordered (SW, SE, NE, NW); interpolation weights
    depend on this order.

    Attributes:
        east_index: Column index of the south-west node
        north_index: Row index of the south-west node
        t: Fractional easting offset within the cell, in [0, 1)
        u: Fractional northing offset within the cell, in [0, 1)
        corner_ids: Node ids of the four cell corners
    """

    east_index: int
    north_index: int
    t: float
    u: float
    corner_ids: Tuple[int, int, int, int]

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "east_index": self.east_index,
            "north_index": self.north_index,
            "t": self.t,
            "u": self.u,
            "corner_ids": list(self.corner_ids),
        }


@dataclass(frozen=True)
class GridCorrection:
    """Interpolated shifts for a single coordinate."""

    delta_east: float
    delta_north: float
    delta_height: float
    vertical_datum: VerticalDatum

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "delta_east": self.delta_east,
            "delta_north": self.delta_north,
            "delta_height": self.delta_height,
            "vertical_datum": self.vertical_datum.name,
        }


@dataclass(frozen=True)
class SourceCoordinate:
    """
    ETRS89 position projected onto the National Grid using GRS80.

    Attributes:
        easting: Easting in metres
        northing: Northing in metres
        ellipsoidal_height: Height above the GRS80 ellipsoid in metres
    """

    easting: float
    northing: float
    ellipsoidal_height: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "easting": self.easting,
            "northing": self.northing,
            "ellipsoidal_height": self.ellipsoidal_height,
        }


@dataclass(frozen=True)
class TargetCoordinate:
    """
    OSGB36 National Grid position with ODN-style orthometric height.

    Attributes:
        easting: OSGB36 easting in metres
        northing: OSGB36 northing in metres
        orthometric_height: Height above the local vertical datum in metres
        vertical_datum: Vertical datum the height refers to
    """

    easting: float
    northing: float
    orthometric_height: float
    vertical_datum: VerticalDatum

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "easting": self.easting,
            "northing": self.northing,
            "orthometric_height": self.orthometric_height,
            "vertical_datum": self.vertical_datum.name,
        }

    def __str__(self) -> str:
        """String representation."""
        return (
            f"OSGB36({self.easting:.3f}, {self.northing:.3f}, "
            f"{self.orthometric_height:.3f} {self.vertical_datum.name})"
        )
