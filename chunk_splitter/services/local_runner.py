"""
local_runner.py — In-Process Split Runner
============================================
Drives the extractor the way a distributed execution engine would, but
inside one process:

    plan → one tracker per piece → claim/extract → (optional) checkpoint

Pieces run on a thread pool. Each piece gets its own tracker and its
own reader, so nothing is shared between workers.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

from chunk_splitter.core.chunk_range import Restriction
from chunk_splitter.core.extractor import ChunkExtractor, FileChunk
from chunk_splitter.services.readable_file import ReadableFile

logger = logging.getLogger(__name__)


@dataclass
class RestrictionResult:
    """Chunks emitted for one restriction, plus any unprocessed residual."""

    restriction: Restriction
    chunks: List[FileChunk] = field(default_factory=list)
    residual: Optional[Restriction] = None


class LocalRunner:
    """Runs the split/claim/extract protocol for whole files locally."""

    def __init__(self, extractor: ChunkExtractor, max_workers: int = 4):
        if max_workers <= 0:
            raise ValueError("max_workers must be a positive integer")
        self.extractor = extractor
        self.max_workers = max_workers

    def plan(self, file: ReadableFile) -> List[Restriction]:
        """Initial restriction of the file, pre-split into pieces."""
        restriction = self.extractor.initial_restriction(file)
        return self.extractor.split_restriction(file, restriction)

    def process_restriction(
        self,
        file: ReadableFile,
        restriction: Restriction,
        max_chunks: Optional[int] = None,
    ) -> RestrictionResult:
        """
        Process one restriction, optionally stopping early.

        Args:
            file: File to read.
            restriction: Chunk indices to process.
            max_chunks: Checkpoint after this many chunks. The rest of
                the restriction comes back as the residual.

        Returns:
            RestrictionResult with the emitted chunks in index order.

        Raises:
            ValueError: If max_chunks is negative.
            ChunkExtractionError: If the file cannot be read.
        """
        if max_chunks is not None and max_chunks < 0:
            raise ValueError("max_chunks cannot be negative")

        tracker = self.extractor.new_tracker(restriction)
        result = RestrictionResult(restriction=restriction)

        if max_chunks == 0:
            result.residual = tracker.release()
        else:
            for chunk in self.extractor.process(file, tracker):
                result.chunks.append(chunk)
                if max_chunks is not None and len(result.chunks) >= max_chunks:
                    # Next claim fails, which ends the loop and closes the reader
                    result.residual = tracker.release()

        tracker.check_done()
        if result.residual is not None:
            logger.info(
                "Checkpointed `%s` after %d chunks, residual %s",
                file.file_id,
                len(result.chunks),
                result.residual,
            )
        return result

    def run(self, file: ReadableFile) -> List[FileChunk]:
        """
        Split a whole file into chunks, processing pieces in parallel.

        Returns:
            All chunks of the file ordered by chunk index.

        Raises:
            ChunkExtractionError: From the first piece that fails.
        """
        pieces = self.plan(file)
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            results = list(
                pool.map(lambda r: self.process_restriction(file, r), pieces)
            )

        chunks = [chunk for result in results for chunk in result.chunks]
        chunks.sort(key=lambda c: c.index)
        logger.info(
            "Split `%s` into %d chunks across %d pieces",
            file.file_id,
            len(chunks),
            len(pieces),
        )
        return chunks
