"""
chunk_range.py — Chunk Index Space
=====================================
Pure arithmetic that maps a file's byte length and a fixed chunk size
onto 1-based chunk indices, plus the Restriction type that describes a
half-open range of those indices.

Chunk i starts at byte offset chunk_size * (i - 1).
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Restriction:
    """
    Half-open range [start, stop) of 1-based chunk indices.

    A restriction represents the chunks of one file that are not yet
    guaranteed to be processed. It may be empty (start == stop).
    """

    start: int
    stop: int

    def __post_init__(self):
        if self.start <= 0:
            raise ValueError(
                f"Restriction start must be a positive chunk index, got {self.start}"
            )
        if self.start > self.stop:
            raise ValueError(
                f"Restriction start {self.start} is after stop {self.stop}"
            )

    def __len__(self) -> int:
        return self.stop - self.start

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.stop))

    def __contains__(self, index: int) -> bool:
        return self.start <= index < self.stop

    def __str__(self) -> str:
        return f"[{self.start}, {self.stop})"

    @property
    def is_empty(self) -> bool:
        return self.start == self.stop

    def split(
        self, desired_per_split: int, min_per_split: int = 1
    ) -> List["Restriction"]:
        """
        Partition this restriction into consecutive sub-restrictions.

        Each piece holds desired_per_split indices. A trailing remainder
        shorter than min_per_split is folded into the last piece.

        Args:
            desired_per_split: Target number of chunk indices per piece.
            min_per_split: Smallest tail that may stand on its own.

        Returns:
            Ordered list of restrictions whose union is exactly this one.

        Raises:
            ValueError: If either size is not positive.
        """
        if desired_per_split <= 0 or min_per_split <= 0:
            raise ValueError("Split sizes must be positive integers")

        pieces = []
        start = self.start
        while start < self.stop:
            end = min(start + desired_per_split, self.stop)
            if self.stop - end < min_per_split:
                end = self.stop
            pieces.append(Restriction(start, end))
            start = end
        return pieces


def num_chunks(total_bytes: int, chunk_size: int) -> int:
    """
    Number of chunk indices allotted to a file of total_bytes.

    This is 1 + total_bytes // chunk_size, which is one more than a
    ceiling division whenever total_bytes is an exact multiple of
    chunk_size (including an empty file). The extra trailing chunk
    reads back as zero bytes.
    """
    if chunk_size <= 0:
        raise ValueError("Chunk size must be a positive integer")
    if total_bytes < 0:
        raise ValueError(f"File size cannot be negative, got {total_bytes}")
    return 1 + total_bytes // chunk_size


def initial_restriction(total_bytes: int, chunk_size: int) -> Restriction:
    """
    Restriction covering every chunk of a file.

    Args:
        total_bytes: File length in bytes.
        chunk_size: Chunk size in bytes.

    Returns:
        Restriction [1, 1 + num_chunks).
    """
    return Restriction(1, 1 + num_chunks(total_bytes, chunk_size))


def chunk_byte_offset(index: int, chunk_size: int) -> int:
    """Byte offset at which chunk `index` (1-based) begins."""
    if index < 1:
        raise ValueError(f"Chunk index must be >= 1, got {index}")
    return chunk_size * (index - 1)


def split_into_unit_restrictions(restriction: Restriction) -> List[Restriction]:
    """Split a restriction into one single-chunk restriction per index."""
    pieces = restriction.split(1, 1)
    logger.debug("Split %s into %d unit restrictions", restriction, len(pieces))
    return pieces


def split_restriction(
    restriction: Restriction, desired_per_split: int = 1, min_per_split: int = 1
) -> List[Restriction]:
    """Split a restriction into pieces of roughly desired_per_split chunks."""
    pieces = restriction.split(desired_per_split, min_per_split)
    logger.debug(
        "Split %s into %d pieces (desired=%d, min=%d)",
        restriction,
        len(pieces),
        desired_per_split,
        min_per_split,
    )
    return pieces
