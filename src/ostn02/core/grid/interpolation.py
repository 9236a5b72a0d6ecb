"""
Bilinear interpolation of grid corrections.

Corner records must be given in the order (SW, SE, NE, NW). The weights
of the two corners away from a shared cell edge are zero on that edge,
so adjacent cells agree along their boundary.
"""

from typing import Sequence, Tuple

from ostn02.models.grid import GridCorrection, GridNodeRecord


def bilinear_weights(t: float, u: float) -> Tuple[float, float, float, float]:
    """
    Weights of the four cell corners for fractional offsets ``(t, u)``.

    Args:
        t: Fractional easting offset within the cell
        u: Fractional northing offset within the cell

    Returns:
        Tuple of (w_sw, w_se, w_ne, w_nw)
    """
    return (
        (1 - t) * (1 - u),
        t * (1 - u),
        t * u,
        (1 - t) * u,
    )


def _blend(weights: Tuple[float, float, float, float], values: Tuple[float, float, float, float]) -> float:
    # Fixed summation order SW, SE, NE, NW keeps results bit-identical.
    return (
        weights[0] * values[0]
        + weights[1] * values[1]
        + weights[2] * values[2]
        + weights[3] * values[3]
    )


def interpolate(corners: Sequence[GridNodeRecord], t: float, u: float) -> GridCorrection:
    """
    Interpolate the correction at ``(t, u)`` inside a grid cell.

    The vertical datum is categorical and is taken from the SW corner
    only, even when other corners belong to a different datum region.

    Args:
        corners: Four records ordered (SW, SE, NE, NW)
        t: Fractional easting offset within the cell
        u: Fractional northing offset within the cell

    Returns:
        Interpolated GridCorrection

    Raises:
        ValueError: If not exactly four corners are given
    """
    if len(corners) != 4:
        raise ValueError(f"Bilinear interpolation needs 4 corners, got {len(corners)}")

    sw, se, ne, nw = corners
    weights = bilinear_weights(t, u)

    return GridCorrection(
        delta_east=_blend(
            weights, (sw.shift_east, se.shift_east, ne.shift_east, nw.shift_east)
        ),
        delta_north=_blend(
            weights, (sw.shift_north, se.shift_north, ne.shift_north, nw.shift_north)
        ),
        delta_height=_blend(
            weights,
            (sw.geoid_undulation, se.geoid_undulation, ne.geoid_undulation, nw.geoid_undulation),
        ),
        vertical_datum=sw.vertical_datum,
    )
