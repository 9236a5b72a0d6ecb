"""
Shared fixtures for ostn02 tests.

Synthetic grids use a small geometry so sources stay tiny; node shift
values are simple functions of the node indices so expected results can
be written down by hand.
"""

from typing import Callable, Iterable, Optional, Set

import pytest

from ostn02.core.grid import IndexedRecordSource, text_opener
from ostn02.models.grid import GridGeometry, VerticalDatum

SMALL_GEOMETRY = GridGeometry(cell_size=1000.0, row_width=4, row_count=3)


def shift_east(east_index: int, north_index: int) -> float:
    return 100.0 + 0.5 * east_index + 0.25 * north_index + 0.125 * east_index * north_index


def shift_north(east_index: int, north_index: int) -> float:
    return -80.0 + 0.25 * east_index - 0.5 * north_index + 0.0625 * east_index * east_index


def geoid(east_index: int, north_index: int) -> float:
    return 45.0 + 0.125 * east_index + 0.375 * north_index


def grid_line(
    node: int,
    se: float,
    sn: float,
    sg: float,
    datum: VerticalDatum = VerticalDatum.NEWLYN_GB,
    geometry: GridGeometry = SMALL_GEOMETRY,
) -> str:
    """Format one dataset line in the OSTN02_OSGM02_GB.txt layout."""
    north_index, east_index = divmod(node - 1, geometry.row_width)
    return (
        f"{node},{east_index * geometry.cell_size:.0f},{north_index * geometry.cell_size:.0f},"
        f"{se:.4f},{sn:.4f},{sg:.4f},{int(datum)}"
    )


def make_grid_text(
    geometry: GridGeometry = SMALL_GEOMETRY,
    skip: Optional[Set[int]] = None,
    datum_for: Optional[Callable[[int, int], VerticalDatum]] = None,
    extra_lines: Iterable[str] = (),
) -> str:
    """Build a dataset covering every node of ``geometry`` except ``skip``."""
    skip = skip or set()
    lines = []
    for north_index in range(geometry.row_count):
        for east_index in range(geometry.row_width):
            node = geometry.node_id(east_index, north_index)
            if node in skip:
                continue
            datum = datum_for(east_index, north_index) if datum_for else VerticalDatum.NEWLYN_GB
            lines.append(
                grid_line(
                    node,
                    shift_east(east_index, north_index),
                    shift_north(east_index, north_index),
                    geoid(east_index, north_index),
                    datum,
                    geometry,
                )
            )
    lines.extend(extra_lines)
    return "\n".join(lines) + "\n"


@pytest.fixture
def small_geometry() -> GridGeometry:
    return SMALL_GEOMETRY


@pytest.fixture
def grid_text() -> str:
    return make_grid_text()


@pytest.fixture
def indexed_source(grid_text: str) -> IndexedRecordSource:
    return IndexedRecordSource.load(text_opener(grid_text), geometry=SMALL_GEOMETRY)


@pytest.fixture
def make_grid() -> Callable[..., str]:
    return make_grid_text


@pytest.fixture
def format_line() -> Callable[..., str]:
    return grid_line
