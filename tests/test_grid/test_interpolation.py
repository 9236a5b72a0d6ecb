"""
Tests for bilinear interpolation.
"""

from typing import List, Optional

import pytest

from ostn02.core.grid.interpolation import bilinear_weights, interpolate
from ostn02.models.grid import GridNodeRecord, VerticalDatum


def make_corners(
    datums: Optional[List[VerticalDatum]] = None,
) -> List[GridNodeRecord]:
    """Corners (SW, SE, NE, NW) with distinct, non-planar values."""
    datums = datums or [VerticalDatum.NEWLYN_GB] * 4
    values = [
        (102.775, -78.244, 44.252),
        (102.812, -78.233, 44.257),
        (102.804, -78.248, 44.275),
        (102.786, -78.241, 44.270),
    ]
    return [
        GridNodeRecord(
            node_id=index + 1,
            shift_east=se,
            shift_north=sn,
            geoid_undulation=sg,
            vertical_datum=datum,
        )
        for index, ((se, sn, sg), datum) in enumerate(zip(values, datums))
    ]


class TestBilinearWeights:
    """Tests for bilinear_weights."""

    @pytest.mark.parametrize(
        "t,u,expected",
        [
            (0.0, 0.0, (1.0, 0.0, 0.0, 0.0)),
            (1.0, 0.0, (0.0, 1.0, 0.0, 0.0)),
            (1.0, 1.0, (0.0, 0.0, 1.0, 0.0)),
            (0.0, 1.0, (0.0, 0.0, 0.0, 1.0)),
            (0.5, 0.5, (0.25, 0.25, 0.25, 0.25)),
        ],
    )
    def test_weights(self, t: float, u: float, expected: tuple) -> None:
        """Test weights at corners and the cell centre."""
        assert bilinear_weights(t, u) == expected

    def test_weights_sum_to_one(self) -> None:
        """Test weights form a partition of unity."""
        assert sum(bilinear_weights(0.307003, 0.255686)) == pytest.approx(1.0, abs=1e-15)


class TestInterpolate:
    """Tests for interpolate."""

    @pytest.mark.parametrize("corner,t,u", [(0, 0.0, 0.0), (1, 1.0, 0.0), (2, 1.0, 1.0), (3, 0.0, 1.0)])
    def test_corner_values_exact(self, corner: int, t: float, u: float) -> None:
        """Test each corner's raw values are reproduced exactly."""
        corners = make_corners()
        correction = interpolate(corners, t, u)

        assert correction.delta_east == corners[corner].shift_east
        assert correction.delta_north == corners[corner].shift_north
        assert correction.delta_height == corners[corner].geoid_undulation

    def test_worked_value(self) -> None:
        """Test interpolation inside the cell against hand-computed values."""
        correction = interpolate(make_corners(), 0.307003, 0.255686)

        assert correction.delta_east == pytest.approx(102.787680, abs=1e-6)
        assert correction.delta_north == pytest.approx(-78.241269, abs=1e-6)
        assert correction.delta_height == pytest.approx(44.258137, abs=1e-6)

    def test_continuity_across_vertical_edge(self) -> None:
        """Test two cells sharing an east-west edge agree on it."""
        west = make_corners()
        # East cell: its SW/NW are the west cell's SE/NE
        east = [
            west[1],
            GridNodeRecord(9, 103.0, -78.0, 44.3, VerticalDatum.NEWLYN_GB),
            GridNodeRecord(10, 103.1, -78.1, 44.4, VerticalDatum.NEWLYN_GB),
            west[2],
        ]

        for u in (0.0, 0.123456, 0.5, 0.987654):
            from_west = interpolate(west, 1.0, u)
            from_east = interpolate(east, 0.0, u)
            assert from_west.delta_east == from_east.delta_east
            assert from_west.delta_north == from_east.delta_north
            assert from_west.delta_height == from_east.delta_height

    def test_continuity_across_horizontal_edge(self) -> None:
        """Test two cells sharing a north-south edge agree on it."""
        south = make_corners()
        north = [
            south[3],
            south[2],
            GridNodeRecord(11, 102.9, -78.3, 44.2, VerticalDatum.NEWLYN_GB),
            GridNodeRecord(12, 102.7, -78.2, 44.1, VerticalDatum.NEWLYN_GB),
        ]

        for t in (0.0, 0.25, 0.307003, 0.75):
            from_south = interpolate(south, t, 1.0)
            from_north = interpolate(north, t, 0.0)
            assert from_south.delta_east == from_north.delta_east
            assert from_south.delta_north == from_north.delta_north
            assert from_south.delta_height == from_north.delta_height

    def test_datum_from_south_west_only(self) -> None:
        """Test the datum flag is the SW corner's even near other corners."""
        corners = make_corners(
            [
                VerticalDatum.NEWLYN_GB,
                VerticalDatum.ST_MARYS,
                VerticalDatum.ST_MARYS,
                VerticalDatum.ST_MARYS,
            ]
        )

        assert interpolate(corners, 0.99, 0.99).vertical_datum is VerticalDatum.NEWLYN_GB
        assert interpolate(corners, 0.0, 0.0).vertical_datum is VerticalDatum.NEWLYN_GB

    def test_deterministic(self) -> None:
        """Test repeated evaluation is bit-identical."""
        corners = make_corners()
        results = {interpolate(corners, 0.3141592653589793, 0.2718281828459045) for _ in range(50)}
        assert len(results) == 1

    @pytest.mark.parametrize("count", [0, 3, 5])
    def test_requires_four_corners(self, count: int) -> None:
        """Test anything but four corners is rejected."""
        corners = (make_corners() * 2)[:count]
        with pytest.raises(ValueError, match="4 corners"):
            interpolate(corners, 0.5, 0.5)
