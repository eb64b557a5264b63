"""A single append-only data file with a size limit."""

from __future__ import annotations

import logging
import os
from typing import BinaryIO

DEFAULT_MAX_SIZE = 100 * 1024 * 1024


class BlockFileError(Exception):
    """Raised when a block file cannot be opened, written or read."""


class BlockFile:
    """Appends block data to one file and reads it back by offset.

    When the file would exceed ``max_size`` further writes are refused;
    the caller is expected to start a new file.
    """

    def __init__(self, filepath: str | os.PathLike[str], max_size: int = DEFAULT_MAX_SIZE) -> None:
        self.log = logging.getLogger("blockfile")
        self.filepath = os.fspath(filepath)
        self.max_size = max_size
        self.current_size = 0
        self._file: BinaryIO | None = None

        if os.path.exists(self.filepath):
            self.current_size = os.path.getsize(self.filepath)
            self.log.debug(
                "Opening existing file: %s (size: %d bytes)", self.filepath, self.current_size
            )
        else:
            self.log.debug("Creating new file: %s", self.filepath)

        try:
            self._file = open(self.filepath, "a+b")
        except OSError as exc:
            self.log.error("Failed to open file: %s", self.filepath)
            raise BlockFileError(f"Failed to open file: {self.filepath}") from exc

    def __repr__(self) -> str:
        return (
            f"BlockFile({self.filepath!r}, current_size={self.current_size}, "
            f"max_size={self.max_size})"
        )

    def _require_open(self) -> BinaryIO:
        if self._file is None or self._file.closed:
            self.log.error("File is not open: %s", self.filepath)
            raise BlockFileError(f"File is not open: {self.filepath}")
        return self._file

    def write(self, data: bytes) -> int:
        """Append ``data`` and return the offset at which it was written."""
        handle = self._require_open()
        size = len(data)
        if not self.can_fit(size):
            self.log.warning(
                "Cannot fit %d bytes (current: %d, max: %d)",
                size,
                self.current_size,
                self.max_size,
            )
            raise BlockFileError(f"Cannot fit {size} bytes")

        try:
            handle.seek(0, os.SEEK_END)
            offset = handle.tell()
            handle.write(data)
        except OSError as exc:
            self.log.error("Failed to write data to file: %s", self.filepath)
            raise BlockFileError(f"Failed to write data to file: {self.filepath}") from exc

        self.current_size += size
        self.log.debug(
            "Wrote %d bytes at offset %d (total size: %d)", size, offset, self.current_size
        )
        return offset

    def read(self, offset: int, size: int) -> bytes:
        """Read up to ``size`` bytes starting at ``offset``."""
        handle = self._require_open()
        if offset < 0:
            self.log.error("Failed to seek to offset %d in file: %s", offset, self.filepath)
            raise BlockFileError(f"Failed to seek to offset {offset}")
        try:
            handle.seek(offset, os.SEEK_SET)
            data = handle.read(size)
        except OSError as exc:
            self.log.error("Failed to seek to offset %d in file: %s", offset, self.filepath)
            raise BlockFileError(f"Failed to seek to offset {offset}") from exc

        if len(data) != size:
            self.log.warning("Read %d bytes, expected %d", len(data), size)
        return data

    def can_fit(self, size: int) -> bool:
        """Return True if ``size`` more bytes stay within the limit."""
        return self.current_size + size <= self.max_size

    def is_open(self) -> bool:
        return self._file is not None and not self._file.closed

    def close(self) -> None:
        """Close the underlying file."""
        if self._file is not None and not self._file.closed:
            self._file.close()
            self.log.debug("Closed file: %s", self.filepath)

    def flush(self) -> None:
        """Push buffered data to the operating system."""
        if self._file is not None and not self._file.closed:
            self._file.flush()

    def __enter__(self) -> BlockFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()