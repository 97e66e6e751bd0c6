"""
extractor.py — Chunk Extraction
==================================
Reads fixed-size byte chunks out of a file for each chunk index claimed
on a RestrictionTracker, tagging every chunk with the file identifier.

Per-file processing (driven by an execution engine):
    1. initial_restriction — chunk index range for the whole file
    2. split_restriction   — optional pre-split into independent pieces
    3. new_tracker         — one tracker per piece
    4. process             — claim indices in order, read and emit chunks

Every chunk is chunk_size bytes except the last one of the file, which
holds whatever remains (possibly nothing).
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional, Tuple

from chunk_splitter.core.chunk_range import (
    Restriction,
    chunk_byte_offset,
    initial_restriction,
    num_chunks,
    split_into_unit_restrictions,
)
from chunk_splitter.core.tracker import RestrictionTracker
from chunk_splitter.services.readable_file import ReadableFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileChunk:
    """One emitted chunk of a file."""

    file_id: str
    index: int     # 1-based chunk index
    offset: int    # Byte offset of the first byte in the file
    data: bytes

    def __len__(self) -> int:
        return len(self.data)

    def as_pair(self) -> Tuple[str, bytes]:
        """The (file identifier, chunk bytes) record sent downstream."""
        return self.file_id, self.data


class ChunkExtractionError(RuntimeError):
    """
    Reading a chunk failed.

    Raised for open, seek and read failures. The offset is None when the
    file could not be opened at all.
    """

    def __init__(self, file_id: str, offset: Optional[int], cause: BaseException):
        self.file_id = file_id
        self.offset = offset
        self.cause = cause
        where = "opening" if offset is None else f"reading at offset {offset} of"
        super().__init__(f"Failed {where} file `{file_id}`: {cause}")


class ChunkExtractor:
    """
    Splits files into chunks of a fixed size.

    Instances hold no per-file state, so one extractor can serve any
    number of trackers on any number of workers.
    """

    def __init__(self, chunk_size: int):
        """
        Args:
            chunk_size: Chunk size in bytes.

        Raises:
            ValueError: If chunk_size is not a positive integer.
        """
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
            raise ValueError(
                f"Chunk size must be a positive integer, got {chunk_size!r}"
            )
        if chunk_size <= 0:
            raise ValueError(
                f"Chunk size must be a positive integer, got {chunk_size}"
            )
        self.chunk_size = chunk_size

    def initial_restriction(self, file: ReadableFile) -> Restriction:
        """Restriction over every chunk index of the file."""
        total_bytes = file.size_bytes
        logger.info(
            "Splitting file `%s` (%d bytes) into %d chunks of %d bytes",
            file.file_id,
            total_bytes,
            num_chunks(total_bytes, self.chunk_size),
            self.chunk_size,
        )
        return initial_restriction(total_bytes, self.chunk_size)

    def split_restriction(
        self, file: ReadableFile, restriction: Restriction
    ) -> List[Restriction]:
        """Pre-split a restriction into one piece per chunk."""
        return split_into_unit_restrictions(restriction)

    def new_tracker(self, restriction: Restriction) -> RestrictionTracker:
        return RestrictionTracker(restriction)

    def read_chunk(self, file_id: str, reader: BinaryIO, index: int) -> FileChunk:
        """
        Read chunk `index` from an open reader.

        Reads until chunk_size bytes are collected or the file ends, so
        only the final chunk of a file comes back short.

        Raises:
            ChunkExtractionError: If seeking or reading fails.
        """
        offset = chunk_byte_offset(index, self.chunk_size)
        buffer = bytearray()
        try:
            reader.seek(offset)
            while len(buffer) < self.chunk_size:
                data = reader.read(self.chunk_size - len(buffer))
                if not data:
                    break
                buffer.extend(data)
        except OSError as e:
            logger.error(
                "Failed to read chunk %d of `%s` at offset %d: %s",
                index,
                file_id,
                offset,
                e,
            )
            raise ChunkExtractionError(file_id, offset, e) from e
        return FileChunk(file_id=file_id, index=index, offset=offset, data=bytes(buffer))

    def process(
        self, file: ReadableFile, tracker: RestrictionTracker
    ) -> Iterator[FileChunk]:
        """
        Emit a chunk for every index the tracker lets us claim.

        One reader is opened for the whole call and closed when the
        generator finishes, is closed early, or raises.

        Raises:
            ChunkExtractionError: If the file cannot be opened or read.
        """
        file_id = file.file_id
        try:
            reader = file.open_seekable()
        except OSError as e:
            logger.error("Failed to open file `%s`: %s", file_id, e)
            raise ChunkExtractionError(file_id, None, e) from e

        with reader:
            index = tracker.current_restriction().start
            while tracker.try_claim(index):
                chunk = self.read_chunk(file_id, reader, index)
                logger.info(
                    "Current restriction: %s. Chunk size: %d bytes. File name: `%s`",
                    tracker.current_restriction(),
                    len(chunk),
                    file_id,
                )
                yield chunk
                index += 1
