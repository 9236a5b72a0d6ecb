"""
Projection of ETRS89 geographic coordinates to the National Grid.

The OSTN02 grid is indexed by ETRS89 positions projected with the
National Grid transverse Mercator parameters on the GRS80 ellipsoid.
Both CRS definitions carry no datum, so pyproj performs a pure
projection with no datum shift.
"""

from typing import List, Tuple, Union

import numpy as np
from pyproj import CRS, Transformer

from ostn02.core.errors import ProjectionError

GRS80_GEOGRAPHIC = "+proj=longlat +ellps=GRS80 +no_defs"

GRS80_NATIONAL_GRID = (
    "+proj=tmerc +lat_0=49 +lon_0=-2 +k=0.9996012717 "
    "+x_0=400000 +y_0=-100000 +ellps=GRS80 +units=m +no_defs"
)


class NationalGridProjector:
    """
    Projects GRS80 longitude/latitude to National Grid easting/northing.
    """

    def __init__(self) -> None:
        """
        Initialize projector.

        Raises:
            ProjectionError: If the pyproj transformer cannot be created
        """
        try:
            self.transformer = Transformer.from_crs(
                CRS.from_proj4(GRS80_GEOGRAPHIC),
                CRS.from_proj4(GRS80_NATIONAL_GRID),
                always_xy=True,
            )
        except Exception as e:
            raise ProjectionError(f"Failed to create projection: {e}") from e

    def project(self, longitude: float, latitude: float) -> Tuple[float, float]:
        """
        Project a single position.

        Args:
            longitude: ETRS89 longitude in decimal degrees
            latitude: ETRS89 latitude in decimal degrees

        Returns:
            Tuple of (easting, northing) in metres

        Raises:
            ProjectionError: If the coordinate is invalid or projection fails
        """
        if not (-180 <= longitude <= 180 and -90 <= latitude <= 90):
            raise ProjectionError(
                f"Invalid geographic coordinate ({longitude}, {latitude})",
                details={"longitude": longitude, "latitude": latitude},
            )
        try:
            easting, northing = self.transformer.transform(longitude, latitude)
        except Exception as e:
            raise ProjectionError(f"Projection failed: {e}") from e

        if not (np.isfinite(easting) and np.isfinite(northing)):
            raise ProjectionError(
                "Projection produced a non-finite result",
                details={"longitude": longitude, "latitude": latitude},
            )
        return float(easting), float(northing)

    def project_batch(
        self,
        longitudes: Union[List[float], np.ndarray],
        latitudes: Union[List[float], np.ndarray],
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Project a batch of positions.

        Args:
            longitudes: ETRS89 longitudes in decimal degrees
            latitudes: ETRS89 latitudes in decimal degrees

        Returns:
            Tuple of (eastings, northings) arrays

        Raises:
            ProjectionError: If the inputs disagree in length or projection fails
        """
        lon_arr = np.asarray(longitudes, dtype=np.float64)
        lat_arr = np.asarray(latitudes, dtype=np.float64)

        if lon_arr.shape != lat_arr.shape:
            raise ProjectionError("longitudes and latitudes must have same length")

        try:
            eastings, northings = self.transformer.transform(lon_arr, lat_arr)
        except Exception as e:
            raise ProjectionError(f"Batch projection failed: {e}") from e

        return np.asarray(eastings), np.asarray(northings)
