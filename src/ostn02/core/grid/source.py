"""
Record sources for the correction grid.

A record source resolves grid node ids to GridNodeRecords. Two
strategies are provided:

- IndexedRecordSource parses the dataset once into dense numpy arrays
  keyed by ``node_id - 1`` for O(1) lookups.
- StreamingRecordSource scans a fresh reader on every call, for
  environments where the dataset cannot be held in memory.

Both return the same record for the same id.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, TextIO

import numpy as np
from numpy.typing import NDArray

from ostn02.core.errors import DataSourceError, MalformedRecordError, RecordNotFoundError
from ostn02.core.grid.parser import parse_record, record_prefix
from ostn02.core.grid.provider import GridOpener
from ostn02.models.grid import OSTN02_GEOMETRY, GridGeometry, GridNodeRecord, VerticalDatum

logger = logging.getLogger(__name__)


class DatasetHealth:
    """
    Tracks malformed-record encounters for one dataset.

    The dataset is flagged suspect once the count reaches the threshold.
    Shared between a grid service and the sources it loads so the count
    survives failed load attempts.
    """

    def __init__(self, suspect_threshold: int = 2) -> None:
        if suspect_threshold < 1:
            raise ValueError(f"suspect_threshold must be >= 1, got {suspect_threshold}")
        self.suspect_threshold = suspect_threshold
        self._malformed_count = 0
        self._lock = threading.Lock()

    @property
    def malformed_count(self) -> int:
        return self._malformed_count

    @property
    def is_suspect(self) -> bool:
        return self._malformed_count >= self.suspect_threshold

    def record_malformed(self, error: MalformedRecordError) -> None:
        """Count a malformed record and warn when the dataset turns suspect."""
        with self._lock:
            self._malformed_count += 1
            count = self._malformed_count

        logger.error(f"Malformed grid record: {error.message}", extra={"details": error.details})
        if count == self.suspect_threshold:
            logger.warning(
                f"Correction grid flagged as suspect after {count} malformed records"
            )


@contextmanager
def open_dataset(opener: GridOpener, health: DatasetHealth) -> Iterator[TextIO]:
    """
    Open a dataset reader, translating read failures into package errors.

    Undecodable bytes count as a malformed record in ``health``; I/O
    failures and truncated compressed data become DataSourceError.
    """
    try:
        with opener() as reader:
            yield reader
    except UnicodeDecodeError as e:
        error = MalformedRecordError(
            f"Correction grid is not valid {e.encoding} text: {e.reason}"
        )
        health.record_malformed(error)
        raise error from e
    except EOFError as e:
        raise DataSourceError(f"Correction grid ended unexpectedly: {e}") from e
    except OSError as e:
        raise DataSourceError(f"Failed to read correction grid: {e}") from e


class RecordSource(ABC):
    """
    Abstract capability to read grid node records by id.
    """

    def __init__(
        self,
        geometry: GridGeometry = OSTN02_GEOMETRY,
        health: Optional[DatasetHealth] = None,
    ) -> None:
        self.geometry = geometry
        self.health = health or DatasetHealth()

    @property
    @abstractmethod
    def max_node_id(self) -> int:
        """Highest node id the source can serve."""

    @abstractmethod
    def resolve(self, node_ids: Sequence[int]) -> List[GridNodeRecord]:
        """
        Resolve node ids to records.

        Args:
            node_ids: Node ids to look up

        Returns:
            Records in the same order as ``node_ids``

        Raises:
            RecordNotFoundError: If any id has no record
            MalformedRecordError: If a required record cannot be decoded
        """

    def get(self, node_id: int) -> GridNodeRecord:
        """Resolve a single node id."""
        return self.resolve([node_id])[0]

    @property
    def is_suspect(self) -> bool:
        """True once malformed records have recurred in this dataset."""
        return self.health.is_suspect


class IndexedRecordSource(RecordSource):
    """
    Array-backed record source with O(1) lookups.

    Shifts are held in an (N, 3) float64 array of east shift, north shift
    and geoid undulation; datum codes and a presence mask sit alongside.
    All arrays are read-only after construction.
    """

    def __init__(
        self,
        shifts: NDArray[np.float64],
        datums: NDArray[np.int8],
        present: NDArray[np.bool_],
        geometry: GridGeometry = OSTN02_GEOMETRY,
        health: Optional[DatasetHealth] = None,
    ) -> None:
        """
        Initialize from pre-built arrays.

        Args:
            shifts: Array of shape (N, 3), row ``i`` for node id ``i + 1``
            datums: Array of shape (N,) with vertical datum codes
            present: Array of shape (N,), True where the node has a record
            geometry: Grid layout
            health: Malformed-record tracker

        Raises:
            ValueError: If array shapes disagree
        """
        super().__init__(geometry=geometry, health=health)

        if shifts.ndim != 2 or shifts.shape[1] != 3:
            raise ValueError(f"shifts must have shape (N, 3), got {shifts.shape}")
        if datums.shape != (shifts.shape[0],) or present.shape != (shifts.shape[0],):
            raise ValueError("datums and present must match the length of shifts")

        self._shifts = shifts
        self._datums = datums
        self._present = present
        for array in (self._shifts, self._datums, self._present):
            array.setflags(write=False)

        present_ids = np.flatnonzero(present)
        self._max_node_id = int(present_ids[-1]) + 1 if present_ids.size else 0
        self._record_count = int(present_ids.size)

    @classmethod
    def from_records(
        cls,
        records: Iterable[GridNodeRecord],
        geometry: GridGeometry = OSTN02_GEOMETRY,
        health: Optional[DatasetHealth] = None,
    ) -> "IndexedRecordSource":
        """
        Build a source from already-parsed records.

        Raises:
            MalformedRecordError: If a node id is duplicated or outside the grid
        """
        health = health or DatasetHealth()
        shifts = np.zeros((geometry.node_count, 3), dtype=np.float64)
        datums = np.zeros(geometry.node_count, dtype=np.int8)
        present = np.zeros(geometry.node_count, dtype=bool)

        for record in records:
            cls._store(record, shifts, datums, present, geometry, health)

        return cls(shifts, datums, present, geometry=geometry, health=health)

    @classmethod
    def load(
        cls,
        opener: GridOpener,
        geometry: GridGeometry = OSTN02_GEOMETRY,
        health: Optional[DatasetHealth] = None,
    ) -> "IndexedRecordSource":
        """
        Parse a complete dataset into an indexed source.

        Args:
            opener: Provider returning a reader over the dataset
            geometry: Grid layout
            health: Malformed-record tracker

        Returns:
            Loaded IndexedRecordSource

        Raises:
            MalformedRecordError: On the first undecodable line
            DataSourceError: If the dataset cannot be read
        """
        health = health or DatasetHealth()
        shifts = np.zeros((geometry.node_count, 3), dtype=np.float64)
        datums = np.zeros(geometry.node_count, dtype=np.int8)
        present = np.zeros(geometry.node_count, dtype=bool)

        start = time.perf_counter()
        with open_dataset(opener, health) as reader:
            for line_number, line in enumerate(reader, start=1):
                if not line.strip():
                    continue
                try:
                    record = parse_record(line, line_number)
                except MalformedRecordError as e:
                    health.record_malformed(e)
                    raise
                cls._store(record, shifts, datums, present, geometry, health, line_number)

        source = cls(shifts, datums, present, geometry=geometry, health=health)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Loaded correction grid: {len(source)} records, "
            f"max node id {source.max_node_id}, {elapsed_ms:.0f} ms"
        )
        return source

    @staticmethod
    def _store(
        record: GridNodeRecord,
        shifts: NDArray[np.float64],
        datums: NDArray[np.int8],
        present: NDArray[np.bool_],
        geometry: GridGeometry,
        health: DatasetHealth,
        line_number: Optional[int] = None,
    ) -> None:
        index = record.node_id - 1
        if not 0 <= index < geometry.node_count:
            error = MalformedRecordError(
                f"Node id {record.node_id} is outside the grid",
                line_number=line_number,
            )
            health.record_malformed(error)
            raise error
        if present[index]:
            error = MalformedRecordError(
                f"Duplicate record for node id {record.node_id}",
                line_number=line_number,
            )
            health.record_malformed(error)
            raise error

        shifts[index] = (record.shift_east, record.shift_north, record.geoid_undulation)
        datums[index] = int(record.vertical_datum)
        present[index] = True

    @property
    def max_node_id(self) -> int:
        return self._max_node_id

    def __len__(self) -> int:
        return self._record_count

    def __contains__(self, node_id: object) -> bool:
        if not isinstance(node_id, (int, np.integer)) or not 1 <= node_id <= self._present.shape[0]:
            return False
        return bool(self._present[node_id - 1])

    def resolve(self, node_ids: Sequence[int]) -> List[GridNodeRecord]:
        missing = [node_id for node_id in node_ids if node_id not in self]
        if missing:
            raise RecordNotFoundError(
                f"No grid record for node ids {sorted(missing)}", node_ids=missing
            )

        records = []
        for node_id in node_ids:
            index = node_id - 1
            shift_east, shift_north, geoid = self._shifts[index]
            records.append(
                GridNodeRecord(
                    node_id=int(node_id),
                    shift_east=float(shift_east),
                    shift_north=float(shift_north),
                    geoid_undulation=float(geoid),
                    vertical_datum=VerticalDatum(int(self._datums[index])),
                )
            )
        return records


class StreamingRecordSource(RecordSource):
    """
    Record source that scans the dataset on every call.

    Each call opens its own reader, so concurrent callers never share a
    stream position. Lookups cost O(dataset size).
    """

    def __init__(
        self,
        opener: GridOpener,
        geometry: GridGeometry = OSTN02_GEOMETRY,
        max_node_id: Optional[int] = None,
        health: Optional[DatasetHealth] = None,
    ) -> None:
        """
        Initialize streaming source.

        Args:
            opener: Provider returning a fresh reader over the dataset
            geometry: Grid layout
            max_node_id: Highest id in the dataset; found with one scan on
                first use when not given
            health: Malformed-record tracker
        """
        super().__init__(geometry=geometry, health=health)
        self._opener = opener
        self._max_node_id: Optional[int] = max_node_id
        self._scan_lock = threading.Lock()

    @property
    def max_node_id(self) -> int:
        if self._max_node_id is None:
            with self._scan_lock:
                if self._max_node_id is None:
                    self._max_node_id = self._scan_max_node_id()
        return self._max_node_id

    def _scan_max_node_id(self) -> int:
        # Only the leading id is read; records are decoded when requested
        highest = 0
        with open_dataset(self._opener, self.health) as reader:
            for line in reader:
                token = line.split(",", 1)[0].strip()
                if token.isdigit():
                    highest = max(highest, int(token))

        logger.debug(f"Streaming grid max node id {highest}")
        return highest

    def resolve(self, node_ids: Sequence[int]) -> List[GridNodeRecord]:
        found: Dict[int, GridNodeRecord] = {}
        pending = {node_id: record_prefix(node_id) for node_id in node_ids}

        with open_dataset(self._opener, self.health) as reader:
            for line_number, line in enumerate(reader, start=1):
                if not pending:
                    break
                for node_id, prefix in list(pending.items()):
                    if not line.startswith(prefix):
                        continue
                    try:
                        found[node_id] = parse_record(line, line_number)
                    except MalformedRecordError as e:
                        self.health.record_malformed(e)
                        raise
                    del pending[node_id]

        if pending:
            raise RecordNotFoundError(
                f"No grid record for node ids {sorted(pending)}", node_ids=pending.keys()
            )

        return [found[node_id] for node_id in node_ids]
