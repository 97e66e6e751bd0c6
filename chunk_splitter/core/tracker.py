"""
tracker.py — Restriction Tracker
===================================
Enforces the claim protocol over one restriction of chunk indices.

Claims must start at the restriction's first index and advance one
index at a time. The first claim that breaks that rule (out of order,
or past the end) moves the tracker to Done; no claim succeeds after
that. The unclaimed suffix can be split off at any time so another
worker can pick it up.

A tracker belongs to exactly one worker and is not thread-safe.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from chunk_splitter.core.chunk_range import Restriction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitResult:
    """Outcome of splitting a live restriction."""

    primary: Restriction     # Kept by the current tracker
    residual: Restriction    # Handed back for another worker


@dataclass(frozen=True)
class Progress:
    """Claimed vs. unclaimed chunk counts within the live range."""

    completed: int
    remaining: int


class RestrictionTracker:
    """
    Tracks claimed chunk indices within a single restriction.

    States:
        Active: cursor points at the last claimed index
               (start - 1 before any claim).
        Done:   reached on the first failed claim or on release().
    """

    def __init__(self, restriction: Restriction):
        self._restriction = restriction
        self._cursor = restriction.start - 1
        self._done = False

    @property
    def restriction(self) -> Restriction:
        """The live range, [start, stop), after any splits."""
        return self._restriction

    @property
    def is_done(self) -> bool:
        return self._done

    def try_claim(self, index: int) -> bool:
        """
        Attempt to claim the next chunk index.

        Succeeds only when index == cursor + 1 and index < stop.
        Otherwise the tracker becomes Done and every later claim fails.

        Returns:
            True if the index was claimed.
        """
        if self._done:
            return False
        if index != self._cursor + 1 or index >= self._restriction.stop:
            logger.debug(
                "Claim of %d rejected (cursor=%d, restriction=%s)",
                index,
                self._cursor,
                self._restriction,
            )
            self._done = True
            return False
        self._cursor = index
        return True

    def current_restriction(self) -> Restriction:
        """The unclaimed suffix [cursor + 1, stop)."""
        return Restriction(self._cursor + 1, self._restriction.stop)

    remaining = current_restriction

    def try_split(self, fraction_of_remainder: float) -> Optional[SplitResult]:
        """
        Split the unclaimed suffix, keeping a leading share of it.

        The split point is cursor + max(1, ceil((stop - cursor) * fraction)),
        so a fraction of 0 keeps nothing beyond the claimed prefix.

        Args:
            fraction_of_remainder: Share of the unclaimed indices the
                current tracker keeps, in [0, 1).

        Returns:
            SplitResult with the narrowed primary and the residual, or
            None if there is nothing left to hand off.

        Raises:
            ValueError: If the fraction is out of range or the tracker
                is already Done.
        """
        if not 0 <= fraction_of_remainder < 1:
            raise ValueError(
                f"Fraction of remainder must be in [0, 1), got {fraction_of_remainder}"
            )
        if self._done:
            raise ValueError(f"Cannot split a finished tracker over {self._restriction}")

        stop = self._restriction.stop
        kept = math.ceil((stop - self._cursor) * fraction_of_remainder)
        split_point = self._cursor + max(1, kept)
        if split_point >= stop:
            return None

        primary = Restriction(self._restriction.start, split_point)
        residual = Restriction(split_point, stop)
        self._restriction = primary
        logger.debug("Split tracker into primary=%s residual=%s", primary, residual)
        return SplitResult(primary=primary, residual=residual)

    def release(self) -> Optional[Restriction]:
        """
        Checkpoint the tracker at its cursor and mark it Done.

        The live range shrinks to the claimed prefix. The unclaimed
        suffix is returned so the caller can resume it elsewhere.

        Returns:
            The residual restriction, or None if everything was claimed.
        """
        residual = self.current_restriction()
        self._restriction = Restriction(self._restriction.start, self._cursor + 1)
        self._done = True
        if residual.is_empty:
            return None
        logger.debug("Released tracker at %d, residual=%s", self._cursor, residual)
        return residual

    def check_done(self) -> None:
        """
        Verify that every index of the live range was claimed.

        Raises:
            ValueError: Naming the first unclaimed index.
        """
        if self._cursor + 1 < self._restriction.stop:
            raise ValueError(
                f"Chunk {self._cursor + 1} of {self._restriction} was never claimed"
            )

    def progress(self) -> Progress:
        completed = self._cursor + 1 - self._restriction.start
        return Progress(
            completed=completed,
            remaining=len(self._restriction) - completed,
        )

    def __repr__(self) -> str:
        return (
            f"RestrictionTracker(restriction={self._restriction}, "
            f"cursor={self._cursor}, done={self._done})"
        )
