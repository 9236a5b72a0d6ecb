"""
Correction grid lookup and interpolation.

This module provides:
- Cell indexing from easting/northing to grid node ids
- Parsing of OSTN02/OSGM02 dataset records
- Indexed and streaming record sources
- Bilinear interpolation of corner corrections
- A grid service that loads the dataset once
"""

from ostn02.core.grid.indexer import locate_cell, node_id, node_indices
from ostn02.core.grid.interpolation import bilinear_weights, interpolate
from ostn02.core.grid.parser import parse_record, record_prefix
from ostn02.core.grid.provider import (
    GridOpener,
    grid_file_opener,
    open_grid_file,
    text_opener,
)
from ostn02.core.grid.service import (
    GridService,
    create_record_source,
    load_indexed_source,
)
from ostn02.core.grid.source import (
    DatasetHealth,
    IndexedRecordSource,
    RecordSource,
    StreamingRecordSource,
    open_dataset,
)

__all__ = [
    # Indexer
    "locate_cell",
    "node_id",
    "node_indices",
    # Interpolation
    "bilinear_weights",
    "interpolate",
    # Parser
    "parse_record",
    "record_prefix",
    # Providers
    "GridOpener",
    "grid_file_opener",
    "open_grid_file",
    "text_opener",
    # Sources
    "DatasetHealth",
    "IndexedRecordSource",
    "RecordSource",
    "StreamingRecordSource",
    "open_dataset",
    # Service
    "GridService",
    "create_record_source",
    "load_indexed_source",
]
