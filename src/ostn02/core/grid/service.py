"""
Grid service owning the loaded correction grid.

The record source is built exactly once, on first use, behind a lock.
After that the source is read-only and is shared without locking.
"""

import logging
import threading
from typing import Callable, Optional

from ostn02.core.config import Settings, settings
from ostn02.core.errors import ConfigurationError
from ostn02.core.grid.provider import GridOpener, grid_file_opener
from ostn02.core.grid.source import (
    DatasetHealth,
    IndexedRecordSource,
    RecordSource,
    StreamingRecordSource,
)
from ostn02.core.logging_config import setup_logging
from ostn02.models.grid import OSTN02_GEOMETRY, GridGeometry

logger = logging.getLogger(__name__)

SourceFactory = Callable[[DatasetHealth], RecordSource]


def load_indexed_source(
    opener: GridOpener,
    geometry: GridGeometry = OSTN02_GEOMETRY,
    health: Optional[DatasetHealth] = None,
) -> IndexedRecordSource:
    """Parse a dataset into an IndexedRecordSource (convenience function)."""
    return IndexedRecordSource.load(opener, geometry=geometry, health=health)


def create_record_source(
    config: Optional[Settings] = None,
    health: Optional[DatasetHealth] = None,
) -> RecordSource:
    """
    Build the record source described by configuration.

    Args:
        config: Settings to use, defaults to the global settings
        health: Malformed-record tracker

    Returns:
        IndexedRecordSource or StreamingRecordSource

    Raises:
        ConfigurationError: If no grid path is configured
        DataSourceError: If the grid file cannot be read
        MalformedRecordError: If an indexed load hits a bad record
    """
    config = config or settings
    if config.grid_path is None:
        raise ConfigurationError(
            "No correction grid configured", config_key="grid_path"
        )

    health = health or DatasetHealth(config.suspect_threshold)
    opener = grid_file_opener(config.grid_path, encoding=config.grid_encoding)

    if config.lookup_strategy == "streaming":
        logger.info(f"Using streaming grid lookups on {config.grid_path}")
        return StreamingRecordSource(opener, health=health)

    logger.info(f"Loading indexed correction grid from {config.grid_path}")
    return load_indexed_source(opener, health=health)


class GridService:
    """
    Lazily loads and holds a record source for the process lifetime.

    Usage:
        service = GridService.from_settings()
        transformer = OSTN02Transformer(service.source)
    """

    def __init__(self, factory: SourceFactory, suspect_threshold: int = 2) -> None:
        """
        Initialize grid service.

        Args:
            factory: Callable building the record source from a health tracker
            suspect_threshold: Malformed-record count that flags the dataset
        """
        self._factory = factory
        self._source: Optional[RecordSource] = None
        self._lock = threading.Lock()
        self.health = DatasetHealth(suspect_threshold)

    @classmethod
    def from_settings(
        cls, config: Optional[Settings] = None, configure_logging: bool = False
    ) -> "GridService":
        """
        Create a service that builds its source from configuration.

        Args:
            config: Settings to use, defaults to the global settings
            configure_logging: Install the package log handlers from ``config``
                before anything is loaded

        Returns:
            GridService that has not loaded its source yet
        """
        config = config or settings
        if configure_logging:
            setup_logging(config=config)
        return cls(
            lambda health: create_record_source(config, health=health),
            suspect_threshold=config.suspect_threshold,
        )

    @classmethod
    def from_opener(
        cls,
        opener: GridOpener,
        geometry: GridGeometry = OSTN02_GEOMETRY,
        suspect_threshold: int = 2,
    ) -> "GridService":
        """Create a service that indexes the dataset returned by ``opener``."""
        return cls(
            lambda health: load_indexed_source(opener, geometry=geometry, health=health),
            suspect_threshold=suspect_threshold,
        )

    @property
    def is_loaded(self) -> bool:
        return self._source is not None

    @property
    def is_suspect(self) -> bool:
        return self.health.is_suspect

    @property
    def source(self) -> RecordSource:
        """
        The loaded record source, loading it on first access.

        A failed load is not cached; the next access retries.
        """
        source = self._source
        if source is not None:
            return source

        with self._lock:
            if self._source is None:
                self._source = self._factory(self.health)
            return self._source
