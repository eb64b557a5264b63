"""A directory of size-limited block files with an on-disk index."""

from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass

from .blockfile import DEFAULT_MAX_SIZE, BlockFile, BlockFileError

# blockId (8 bytes), fileId (4 bytes), offset (8 bytes), size (8 bytes)
_INDEX_ENTRY = struct.Struct("<QIqQ")
INDEX_FILE_NAME = "blocks.index"


class BlockDirError(Exception):
    """Raised when a block cannot be stored or retrieved."""


@dataclass(frozen=True)
class BlockLocation:
    """Where a block lives: which file, at what offset, how many bytes."""

    file_id: int = 0
    offset: int = 0
    size: int = 0


class BlockDir:
    """Stores blocks across numbered files and keeps an index of their locations."""

    def __init__(
        self, dir_path: str | os.PathLike[str], max_file_size: int = DEFAULT_MAX_SIZE
    ) -> None:
        self.log = logging.getLogger("blockdir")
        self.dir_path = os.fspath(dir_path)
        self.max_file_size = max_file_size
        self.index_file_path = os.path.join(self.dir_path, INDEX_FILE_NAME)
        self._current_file_id = 0
        self._files: dict[int, BlockFile] = {}
        self._index: dict[int, BlockLocation] = {}

        if not os.path.exists(self.dir_path):
            try:
                os.makedirs(self.dir_path)
            except OSError as exc:
                self.log.error("Failed to create directory %s: %s", self.dir_path, exc)
                raise BlockDirError(f"Failed to create directory: {exc}") from exc
            self.log.info("Created block directory: %s", self.dir_path)

        if os.path.exists(self.index_file_path):
            if not self._load_index():
                self.log.error("Failed to load index file")
                raise BlockDirError("Failed to load index file")
            self.log.info("Loaded index with %d blocks", len(self._index))
            self._current_file_id = max(
                (location.file_id for location in self._index.values()), default=0
            )
        else:
            self.log.info("No existing index file, starting fresh")

        for file_id in {location.file_id for location in self._index.values()}:
            path = self._block_file_path(file_id)
            if not os.path.exists(path):
                continue
            try:
                self._files[file_id] = BlockFile(path, self.max_file_size)
            except BlockFileError:
                self.log.error("Failed to open block file: %s", path)
            else:
                self.log.debug("Opened existing block file: %s", path)

        self.log.info(
            "BlockDir initialized with %d files and %d blocks",
            len(self._files),
            len(self._index),
        )

    def __repr__(self) -> str:
        return (
            f"BlockDir({self.dir_path!r}, files={len(self._files)}, "
            f"blocks={len(self._index)})"
        )

    def write_block(self, block_id: int, data: bytes) -> None:
        """Store ``data`` under ``block_id``; existing blocks are never overwritten."""
        if block_id in self._index:
            self.log.warning("Block %d already exists, overwriting not supported", block_id)
            raise BlockDirError("Block already exists")

        block_file = self._active_block_file(len(data))
        if block_file is None:
            self.log.error("Failed to get active block file")
            raise BlockDirError("Failed to get active block file")

        try:
            offset = block_file.write(data)
        except BlockFileError as exc:
            self.log.error("Failed to write block %d to file", block_id)
            raise BlockDirError(f"Failed to write block to file: {exc}") from exc

        self._index[block_id] = BlockLocation(self._current_file_id, offset, len(data))
        self.log.debug(
            "Wrote block %d to file %d at offset %d (size: %d bytes)",
            block_id,
            self._current_file_id,
            offset,
            len(data),
        )
        self._save_index()

    def read_block(self, block_id: int, max_size: int | None = None) -> bytes:
        """Return the data of ``block_id``; refuse blocks larger than ``max_size``."""
        location = self._index.get(block_id)
        if location is None:
            self.log.error("Block %d not found in index", block_id)
            raise BlockDirError("Block not found in index")

        if max_size is not None and max_size < location.size:
            self.log.error(
                "Buffer too small for block %d (need %d, have %d)",
                block_id,
                location.size,
                max_size,
            )
            raise BlockDirError("Buffer too small for block")

        block_file = self._block_file(location.file_id)
        if block_file is None:
            self.log.error("Block file %d not found", location.file_id)
            raise BlockDirError("Block file not found")

        try:
            data = block_file.read(location.offset, location.size)
        except BlockFileError as exc:
            self.log.error("Failed to read block %d: %s", block_id, exc)
            raise BlockDirError(f"Failed to read block: {exc}") from exc

        if len(data) != location.size:
            self.log.error(
                "Failed to read block %d (read %d bytes, expected %d)",
                block_id,
                len(data),
                location.size,
            )
            raise BlockDirError("Incomplete block read")

        self.log.debug(
            "Read block %d from file %d at offset %d (size: %d bytes)",
            block_id,
            location.file_id,
            location.offset,
            location.size,
        )
        return data

    def block_location(self, block_id: int) -> BlockLocation | None:
        """Return where ``block_id`` is stored, or None if it is unknown."""
        return self._index.get(block_id)

    def has_block(self, block_id: int) -> bool:
        return block_id in self._index

    def flush(self) -> None:
        """Flush every block file and rewrite the index."""
        for block_file in self._files.values():
            block_file.flush()
        if not self._save_index():
            self.log.error("Failed to save index during flush")

    def close(self) -> None:
        """Flush everything and close all block files."""
        self.flush()
        for block_file in self._files.values():
            block_file.close()

    @property
    def file_count(self) -> int:
        """Number of block files currently open."""
        return len(self._files)

    @property
    def block_count(self) -> int:
        """Number of blocks in the index."""
        return len(self._index)

    def __enter__(self) -> BlockDir:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _block_file_path(self, file_id: int) -> str:
        return os.path.join(self.dir_path, f"block_{file_id:06d}.dat")

    def _create_block_file(self, file_id: int) -> BlockFile | None:
        path = self._block_file_path(file_id)
        try:
            block_file = BlockFile(path, self.max_file_size)
        except BlockFileError:
            self.log.error("Failed to create block file: %s", path)
            return None
        self.log.info("Created new block file: %s", path)
        self._files[file_id] = block_file
        return block_file

    def _active_block_file(self, data_size: int) -> BlockFile | None:
        current = self._files.get(self._current_file_id)
        if current is not None and current.can_fit(data_size):
            return current
        self._current_file_id += 1
        return self._create_block_file(self._current_file_id)

    def _block_file(self, file_id: int) -> BlockFile | None:
        block_file = self._files.get(file_id)
        if block_file is not None:
            return block_file
        path = self._block_file_path(file_id)
        if not os.path.exists(path):
            return None
        try:
            block_file = BlockFile(path, self.max_file_size)
        except BlockFileError:
            return None
        self._files[file_id] = block_file
        return block_file

    def _load_index(self) -> bool:
        try:
            with open(self.index_file_path, "rb") as handle:
                raw = handle.read()
        except OSError:
            self.log.error("Failed to open index file: %s", self.index_file_path)
            return False

        # A trailing partial entry is ignored.
        usable = len(raw) - len(raw) % _INDEX_ENTRY.size
        self._index = {
            block_id: BlockLocation(file_id, offset, size)
            for block_id, file_id, offset, size in _INDEX_ENTRY.iter_unpack(raw[:usable])
        }
        self.log.debug("Loaded %d entries from index", len(self._index))
        return True

    def _save_index(self) -> bool:
        payload = b"".join(
            _INDEX_ENTRY.pack(block_id, location.file_id, location.offset, location.size)
            for block_id, location in self._index.items()
        )
        try:
            with open(self.index_file_path, "wb") as handle:
                handle.write(payload)
        except OSError:
            self.log.error("Failed to open index file for writing: %s", self.index_file_path)
            return False
        self.log.debug("Saved %d entries to index", len(self._index))
        return True