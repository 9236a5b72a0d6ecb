"""
Parser for OSTN02/OSGM02 correction grid records.

Each line of the dataset is comma separated:

    node_id, etrs89_easting, etrs89_northing, shift_east, shift_north,
    geoid_undulation, datum_code

Only the node id, the three shifts and the datum code are used.
"""

import math
from typing import Optional

from ostn02.core.errors import MalformedRecordError
from ostn02.models.grid import GridNodeRecord, VerticalDatum

FIELD_COUNT = 7

NODE_ID_FIELD = 0
SHIFT_EAST_FIELD = 3
SHIFT_NORTH_FIELD = 4
GEOID_FIELD = 5
DATUM_FIELD = 6


def record_prefix(node_id: int) -> str:
    """Line prefix that identifies the record for ``node_id``."""
    return f"{node_id},"


def _parse_float(fields: list, index: int, line: str, line_number: Optional[int]) -> float:
    try:
        value = float(fields[index])
    except ValueError as e:
        raise MalformedRecordError(
            f"Field {index} is not a number: {fields[index]!r}",
            line_number=line_number,
            line=line,
        ) from e
    if not math.isfinite(value):
        raise MalformedRecordError(
            f"Field {index} is not finite: {fields[index]!r}",
            line_number=line_number,
            line=line,
        )
    return value


def parse_record(line: str, line_number: Optional[int] = None) -> GridNodeRecord:
    """
    Decode one dataset line into a GridNodeRecord.

    Args:
        line: Raw line from the dataset (trailing newline allowed)
        line_number: 1-based line number, for error reporting

    Returns:
        Parsed GridNodeRecord

    Raises:
        MalformedRecordError: If the field count is wrong, a field is not
            numeric, or the datum code is unknown
    """
    fields = [field.strip() for field in line.strip().split(",")]

    if len(fields) < FIELD_COUNT:
        raise MalformedRecordError(
            f"Expected {FIELD_COUNT} fields, got {len(fields)}",
            line_number=line_number,
            line=line,
        )

    try:
        node_id = int(fields[NODE_ID_FIELD])
        datum_code = int(fields[DATUM_FIELD])
    except ValueError as e:
        raise MalformedRecordError(
            "Node id and datum code must be integers",
            line_number=line_number,
            line=line,
        ) from e

    if node_id < 1:
        raise MalformedRecordError(
            f"Node id must be positive, got {node_id}",
            line_number=line_number,
            line=line,
        )

    try:
        datum = VerticalDatum(datum_code)
    except ValueError as e:
        raise MalformedRecordError(
            f"Unknown vertical datum code {datum_code}",
            line_number=line_number,
            line=line,
        ) from e

    return GridNodeRecord(
        node_id=node_id,
        shift_east=_parse_float(fields, SHIFT_EAST_FIELD, line, line_number),
        shift_north=_parse_float(fields, SHIFT_NORTH_FIELD, line, line_number),
        geoid_undulation=_parse_float(fields, GEOID_FIELD, line, line_number),
        vertical_datum=datum,
    )
