"""
Correction grid data providers.

A provider is a zero-argument callable returning a fresh text reader over
the dataset. Record sources only depend on this callable, so the grid can
come from a file, a gzipped file or an in-memory string.
"""

import gzip
import io
import logging
from pathlib import Path
from typing import Callable, TextIO, Union

from ostn02.core.errors import DataSourceError

logger = logging.getLogger(__name__)

GridOpener = Callable[[], TextIO]


def open_grid_file(path: Union[str, Path], encoding: str = "utf-8") -> TextIO:
    """
    Open a correction grid file for reading.

    Files ending in ``.gz`` are decompressed transparently.

    Args:
        path: Path to the grid file
        encoding: Text encoding

    Returns:
        Text reader positioned at the first record

    Raises:
        DataSourceError: If the file does not exist or cannot be opened
    """
    path = Path(path)
    if not path.is_file():
        raise DataSourceError(f"Grid file not found: {path.name}", file_path=str(path))

    try:
        if path.suffix == ".gz":
            return gzip.open(path, "rt", encoding=encoding, newline="")
        return open(path, "r", encoding=encoding, newline="")
    except OSError as e:
        raise DataSourceError(
            f"Could not open grid file: {e}", file_path=str(path)
        ) from e


def grid_file_opener(path: Union[str, Path], encoding: str = "utf-8") -> GridOpener:
    """
    Create an opener that reopens a grid file on every call.

    Args:
        path: Path to the grid file
        encoding: Text encoding

    Returns:
        Zero-argument callable returning a new reader
    """
    path = Path(path)

    def opener() -> TextIO:
        return open_grid_file(path, encoding=encoding)

    return opener


def text_opener(text: str) -> GridOpener:
    """
    Create an opener over an in-memory dataset.

    Args:
        text: Complete dataset content

    Returns:
        Zero-argument callable returning a new reader
    """

    def opener() -> TextIO:
        return io.StringIO(text)

    return opener
