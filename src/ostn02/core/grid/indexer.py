"""
Grid cell indexing.

Maps a National Grid easting/northing to the enclosing 1 km cell of the
correction grid: the four corner node ids and the fractional position
of the coordinate inside the cell.
"""

import math
from typing import Optional, Tuple

from ostn02.core.errors import OutOfRangeError
from ostn02.models.grid import OSTN02_GEOMETRY, CellLocation, GridGeometry


def node_id(east_index: int, north_index: int, geometry: GridGeometry = OSTN02_GEOMETRY) -> int:
    """
    Calculate the node id for a pair of grid indices.

    Args:
        east_index: Column index (0-based, from the west edge)
        north_index: Row index (0-based, from the south edge)
        geometry: Grid layout

    Returns:
        1-based node id

    Raises:
        OutOfRangeError: If the indices lie outside the grid rectangle
    """
    if not (0 <= east_index < geometry.row_width and 0 <= north_index < geometry.row_count):
        raise OutOfRangeError(
            f"Grid indices ({east_index}, {north_index}) are outside the grid",
            details={"east_index": east_index, "north_index": north_index},
        )
    return geometry.node_id(east_index, north_index)


def node_indices(node: int, geometry: GridGeometry = OSTN02_GEOMETRY) -> Tuple[int, int]:
    """
    Recover grid indices from a node id (inverse of ``node_id``).

    Args:
        node: 1-based node id
        geometry: Grid layout

    Returns:
        Tuple of (east_index, north_index)

    Raises:
        OutOfRangeError: If the id is outside the grid rectangle
    """
    if not 1 <= node <= geometry.node_count:
        raise OutOfRangeError(
            f"Node id {node} is outside the grid",
            details={"node_id": node, "max_node_id": geometry.node_count},
        )
    north_index, east_index = divmod(node - 1, geometry.row_width)
    return east_index, north_index


def locate_cell(
    easting: float,
    northing: float,
    geometry: GridGeometry = OSTN02_GEOMETRY,
    max_node_id: Optional[int] = None,
) -> CellLocation:
    """
    Find the grid cell enclosing a coordinate.

    Args:
        easting: Easting in metres on the GRS80 National Grid projection
        northing: Northing in metres on the GRS80 National Grid projection
        geometry: Grid layout
        max_node_id: Highest node id present in the dataset; defaults to
            the full grid rectangle

    Returns:
        CellLocation with corner ids ordered (SW, SE, NE, NW)

    Raises:
        OutOfRangeError: If the coordinate is not finite, is negative, or
            its cell extends beyond the grid extent
    """
    if not (math.isfinite(easting) and math.isfinite(northing)):
        raise OutOfRangeError(
            "Coordinate must be finite", easting=easting, northing=northing
        )
    if easting < 0 or northing < 0:
        raise OutOfRangeError(
            "Coordinate lies south or west of the grid origin",
            easting=easting,
            northing=northing,
        )

    cell = geometry.cell_size
    east_index = int(math.floor(easting / cell))
    north_index = int(math.floor(northing / cell))

    # The north-east corner must be a real node, otherwise the id would
    # wrap onto the next row.
    if east_index + 1 >= geometry.row_width or north_index + 1 >= geometry.row_count:
        raise OutOfRangeError(
            "Coordinate lies beyond the grid extent",
            easting=easting,
            northing=northing,
        )

    limit = geometry.node_count if max_node_id is None else max_node_id
    ne_id = geometry.node_id(east_index + 1, north_index + 1)
    if ne_id > limit:
        raise OutOfRangeError(
            "Coordinate lies beyond the last node of the dataset",
            easting=easting,
            northing=northing,
            details={"node_id": ne_id, "max_node_id": limit},
        )

    t = (easting - east_index * cell) / cell
    u = (northing - north_index * cell) / cell

    corner_ids = (
        geometry.node_id(east_index, north_index),
        geometry.node_id(east_index + 1, north_index),
        ne_id,
        geometry.node_id(east_index, north_index + 1),
    )

    return CellLocation(
        east_index=east_index,
        north_index=north_index,
        t=t,
        u=u,
        corner_ids=corner_ids,
    )
