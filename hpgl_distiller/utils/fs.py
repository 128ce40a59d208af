"""Filesystem helpers for input acquisition, output sinks and YAML.

Provides:
    - Whole-document reads with a size cross-check (short reads are fatal)
    - Output sinks opened for overwrite (never append)
    - YAML load with safe_load

The distiller core never touches the filesystem itself; the CLI uses
these helpers to hand it an in-memory buffer and a writable byte sink.

Usage:
    from hpgl_distiller.utils import fs
    data = fs.read_document("drawing.hpgl")
    with fs.open_sink("/dev/ttyS1") as sink:
        ...
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, BinaryIO, Dict, Union

import yaml

from hpgl_distiller.errors import (
    InputAllocationError,
    InputOpenError,
    OutputOpenError,
    ShortReadError,
)

logger = logging.getLogger(__name__)


def file_size(path: Union[str, Path]) -> int:
    """Size of *path* in bytes as reported by the filesystem."""
    return os.stat(path).st_size


def read_document(path: Union[str, Path]) -> bytes:
    """Read an entire input document into memory.

    Parameters
    ----------
    path : Union[str, Path]
        Input HPGL file

    Returns
    -------
    bytes
        Immutable copy of the whole file

    Raises
    ------
    InputOpenError
        If the file cannot be stat'ed or opened
    InputAllocationError
        If the buffer for the document cannot be allocated
    ShortReadError
        If the number of bytes read differs from the size reported by stat

    Notes
    -----
    The file may contain non-ASCII bytes, so it is read in binary mode
    rather than line by line.
    """
    path = Path(path)
    try:
        declared_size = file_size(path)
    except OSError as exc:
        raise InputOpenError(f"Cannot stat '{path}' ({exc.strerror})") from exc

    try:
        with open(path, "rb") as f:
            data = f.read(declared_size)
    except MemoryError as exc:
        raise InputAllocationError(
            f"Cannot allocate enough memory to read input HPGL file "
            f"'{path}' of size {declared_size} bytes"
        ) from exc
    except OSError as exc:
        raise InputOpenError(
            f"Cannot open input file '{path}' for reading ({exc.strerror})"
        ) from exc

    if len(data) != declared_size:
        raise ShortReadError(str(path), declared_size, len(data))

    logger.debug("Read %d bytes from %s", len(data), path)
    return data


def open_sink(path: Union[str, Path]) -> BinaryIO:
    """Open an output sink for writing, truncating any existing content.

    Parameters
    ----------
    path : Union[str, Path]
        Output file or device node (e.g. a serial port)

    Returns
    -------
    BinaryIO
        File object opened in ``wb`` mode; the caller owns closing it

    Raises
    ------
    OutputOpenError
        If the destination cannot be opened
    """
    try:
        return open(path, "wb")
    except OSError as exc:
        raise OutputOpenError(
            f"Cannot open output file '{path}' for writing ({exc.strerror})"
        ) from exc


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content (``None`` for an empty file)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)
