"""
ETRS89 to OSGB36/ODN transformation using the OSTN02/OSGM02 grid.

Accuracy is approximately 10 centimetres. The transformation locates the
1 km grid cell enclosing the projected ETRS89 position, resolves its four
corner records, bilinearly interpolates their shifts and applies them.
"""

import logging
from typing import List, Optional, Tuple, Union

import numpy as np

from ostn02.core.errors import OSTN02Exception
from ostn02.core.grid.indexer import locate_cell
from ostn02.core.grid.interpolation import interpolate
from ostn02.core.grid.source import RecordSource
from ostn02.core.projection import NationalGridProjector
from ostn02.models.grid import GridCorrection, SourceCoordinate, TargetCoordinate, VerticalDatum

logger = logging.getLogger(__name__)


class OSTN02Transformer:
    """
    Applies grid corrections from a record source.

    Holds no state between calls other than the read-only record source,
    so one instance can be shared across threads.
    """

    def __init__(
        self,
        source: RecordSource,
        projector: Optional[NationalGridProjector] = None,
    ) -> None:
        """
        Initialize transformer.

        Args:
            source: Record source for the correction grid
            projector: Projector for geographic input, created on first use if omitted
        """
        self.source = source
        self._projector = projector

    @property
    def projector(self) -> NationalGridProjector:
        if self._projector is None:
            self._projector = NationalGridProjector()
        return self._projector

    def correction_at(self, easting: float, northing: float) -> GridCorrection:
        """
        Interpolated correction at a projected ETRS89 position.

        Args:
            easting: Easting on the GRS80 National Grid projection
            northing: Northing on the GRS80 National Grid projection

        Returns:
            GridCorrection for the position

        Raises:
            OutOfRangeError: If the position is outside the grid
            RecordNotFoundError: If a corner node has no record
            MalformedRecordError: If a corner record is corrupt
        """
        cell = locate_cell(
            easting,
            northing,
            geometry=self.source.geometry,
            max_node_id=self.source.max_node_id,
        )
        corners = self.source.resolve(cell.corner_ids)
        logger.debug(
            f"Cell ({cell.east_index}, {cell.north_index}) corners {cell.corner_ids} "
            f"t={cell.t:.6f} u={cell.u:.6f}"
        )
        return interpolate(corners, cell.t, cell.u)

    def transform(
        self, easting: float, northing: float, ellipsoidal_height: float = 0.0
    ) -> TargetCoordinate:
        """
        Transform a projected ETRS89 position to OSGB36/ODN.

        Args:
            easting: Easting on the GRS80 National Grid projection
            northing: Northing on the GRS80 National Grid projection
            ellipsoidal_height: Height above GRS80 in metres

        Returns:
            TargetCoordinate with OSGB36 easting/northing and orthometric height

        Raises:
            OutOfRangeError: If the position is outside the grid
            RecordNotFoundError: If a corner node has no record
            MalformedRecordError: If a corner record is corrupt
        """
        correction = self.correction_at(easting, northing)
        return TargetCoordinate(
            easting=easting + correction.delta_east,
            northing=northing + correction.delta_north,
            orthometric_height=ellipsoidal_height - correction.delta_height,
            vertical_datum=correction.vertical_datum,
        )

    def transform_coordinate(self, coordinate: SourceCoordinate) -> TargetCoordinate:
        """Transform a SourceCoordinate."""
        return self.transform(
            coordinate.easting, coordinate.northing, coordinate.ellipsoidal_height
        )

    def transform_geographic(
        self, latitude: float, longitude: float, ellipsoidal_height: float = 0.0
    ) -> TargetCoordinate:
        """
        Transform an ETRS89 latitude/longitude/height to OSGB36/ODN.

        Args:
            latitude: ETRS89 latitude in decimal degrees
            longitude: ETRS89 longitude in decimal degrees
            ellipsoidal_height: Height above GRS80 in metres

        Returns:
            TargetCoordinate

        Raises:
            ProjectionError: If the position cannot be projected
            OutOfRangeError: If the projected position is outside the grid
            RecordNotFoundError: If a corner node has no record
        """
        easting, northing = self.projector.project(longitude, latitude)
        return self.transform(easting, northing, ellipsoidal_height)

    def transform_batch(
        self,
        eastings: Union[List[float], np.ndarray],
        northings: Union[List[float], np.ndarray],
        heights: Optional[Union[List[float], np.ndarray]] = None,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray, List[VerticalDatum]]:
        """
        Transform a batch of projected ETRS89 positions.

        The first failing position aborts the batch; no partial result is
        returned.

        Args:
            eastings: Eastings on the GRS80 National Grid projection
            northings: Northings on the GRS80 National Grid projection
            heights: Ellipsoidal heights, zero if omitted

        Returns:
            Tuple of (eastings, northings, orthometric_heights, vertical_datums)

        Raises:
            ValueError: If the inputs disagree in length
            OSTN02Exception: From the first position that fails
        """
        e_arr = np.asarray(eastings, dtype=np.float64)
        n_arr = np.asarray(northings, dtype=np.float64)
        h_arr = (
            np.zeros_like(e_arr)
            if heights is None
            else np.asarray(heights, dtype=np.float64)
        )

        if not (e_arr.shape == n_arr.shape == h_arr.shape) or e_arr.ndim != 1:
            raise ValueError("eastings, northings and heights must be 1-D and the same length")

        out_e = np.empty_like(e_arr)
        out_n = np.empty_like(e_arr)
        out_h = np.empty_like(e_arr)
        datums: List[VerticalDatum] = []

        for i in range(e_arr.shape[0]):
            try:
                target = self.transform(float(e_arr[i]), float(n_arr[i]), float(h_arr[i]))
            except OSTN02Exception as e:
                e.details.setdefault("batch_index", i)
                raise
            out_e[i] = target.easting
            out_n[i] = target.northing
            out_h[i] = target.orthometric_height
            datums.append(target.vertical_datum)

        return out_e, out_n, out_h, datums


def transform_etrs89_grid(
    easting: float,
    northing: float,
    ellipsoidal_height: float,
    source: RecordSource,
) -> Tuple[float, float, float, VerticalDatum]:
    """
    Transform a projected ETRS89 position (convenience function).

    Args:
        easting: Easting on the GRS80 National Grid projection
        northing: Northing on the GRS80 National Grid projection
        ellipsoidal_height: Height above GRS80 in metres
        source: Record source for the correction grid

    Returns:
        Tuple of (easting, northing, orthometric_height, vertical_datum)
    """
    target = OSTN02Transformer(source).transform(easting, northing, ellipsoidal_height)
    return target.easting, target.northing, target.orthometric_height, target.vertical_datum
