"""
test_tracker.py — Unit Tests for the Restriction Tracker
===========================================================
"""

import pytest

from chunk_splitter.core.chunk_range import Restriction
from chunk_splitter.core.tracker import Progress, RestrictionTracker


class TestTryClaim:
    """Tests for the claim protocol."""

    def test_sequential_claims_until_stop(self):
        """Claims from start upward succeed until stop is reached."""
        tracker = RestrictionTracker(Restriction(2, 5))
        assert tracker.try_claim(2)
        assert tracker.try_claim(3)
        assert tracker.try_claim(4)
        assert not tracker.try_claim(5)
        assert tracker.is_done

    def test_first_claim_must_be_start(self):
        """Skipping the first index fails."""
        tracker = RestrictionTracker(Restriction(2, 5))
        assert not tracker.try_claim(3)
        assert tracker.is_done

    def test_gap_fails(self):
        """A gap between claims fails."""
        tracker = RestrictionTracker(Restriction(1, 10))
        assert tracker.try_claim(1)
        assert not tracker.try_claim(3)

    def test_repeat_claim_fails(self):
        """Re-claiming the same index fails."""
        tracker = RestrictionTracker(Restriction(1, 10))
        assert tracker.try_claim(1)
        assert not tracker.try_claim(1)

    def test_done_is_terminal(self):
        """After a failed claim even the correct next index fails."""
        tracker = RestrictionTracker(Restriction(1, 10))
        assert tracker.try_claim(1)
        assert not tracker.try_claim(5)
        assert not tracker.try_claim(2)
        assert tracker.current_restriction() == Restriction(2, 10)

    def test_empty_restriction(self):
        """Nothing can be claimed from an empty restriction."""
        tracker = RestrictionTracker(Restriction(4, 4))
        assert not tracker.try_claim(4)


class TestCurrentRestriction:
    """Tests for the unclaimed suffix."""

    def test_advances_with_claims(self):
        """current_restriction is [cursor + 1, stop)."""
        tracker = RestrictionTracker(Restriction(1, 4))
        assert tracker.current_restriction() == Restriction(1, 4)
        tracker.try_claim(1)
        assert tracker.current_restriction() == Restriction(2, 4)
        tracker.try_claim(2)
        tracker.try_claim(3)
        assert tracker.current_restriction().is_empty

    def test_remaining_alias(self):
        """remaining() matches current_restriction()."""
        tracker = RestrictionTracker(Restriction(3, 8))
        tracker.try_claim(3)
        assert tracker.remaining() == tracker.current_restriction()


class TestRelease:
    """Tests for checkpointing."""

    def test_release_returns_residual(self):
        """The unclaimed suffix is handed back and claims stop."""
        tracker = RestrictionTracker(Restriction(1, 6))
        tracker.try_claim(1)
        tracker.try_claim(2)
        assert tracker.release() == Restriction(3, 6)
        assert tracker.is_done
        assert tracker.restriction == Restriction(1, 3)
        assert not tracker.try_claim(3)
        tracker.check_done()

    def test_release_before_any_claim(self):
        """Releasing untouched work hands back the whole range."""
        tracker = RestrictionTracker(Restriction(4, 9))
        assert tracker.release() == Restriction(4, 9)
        assert tracker.restriction.is_empty

    def test_release_when_finished(self):
        """Nothing is left once everything was claimed."""
        tracker = RestrictionTracker(Restriction(1, 2))
        tracker.try_claim(1)
        assert tracker.release() is None


class TestTrySplit:
    """Tests for dynamic splitting."""

    def test_half_split(self):
        """Half the unclaimed work moves to the residual."""
        tracker = RestrictionTracker(Restriction(1, 11))
        tracker.try_claim(1)
        tracker.try_claim(2)
        result = tracker.try_split(0.5)
        # cursor=2 → 2 + ceil((11 - 2) * 0.5) = 7
        assert result.primary == Restriction(1, 7)
        assert result.residual == Restriction(7, 11)
        assert tracker.restriction == Restriction(1, 7)
        for i in range(3, 7):
            assert tracker.try_claim(i)
        assert not tracker.try_claim(7)
        tracker.check_done()

    def test_zero_fraction_checkpoints(self):
        """A fraction of 0 keeps only the claimed prefix."""
        tracker = RestrictionTracker(Restriction(1, 5))
        tracker.try_claim(1)
        result = tracker.try_split(0)
        assert result.primary == Restriction(1, 2)
        assert result.residual == Restriction(2, 5)
        assert not tracker.try_claim(2)

    def test_nothing_to_split(self):
        """Keeping the whole remainder leaves nothing to hand off."""
        tracker = RestrictionTracker(Restriction(1, 3))
        tracker.try_claim(1)
        assert tracker.try_split(0.9) is None
        assert tracker.restriction == Restriction(1, 3)

    def test_invalid_fraction(self):
        """Fractions outside [0, 1) are rejected."""
        tracker = RestrictionTracker(Restriction(1, 3))
        with pytest.raises(ValueError, match=r"\[0, 1\)"):
            tracker.try_split(1.0)

    def test_split_after_done(self):
        """A finished tracker cannot be split."""
        tracker = RestrictionTracker(Restriction(1, 3))
        tracker.release()
        with pytest.raises(ValueError, match="finished"):
            tracker.try_split(0.5)


class TestCheckDoneAndProgress:
    """Tests for completion checks and progress."""

    def test_check_done_unclaimed(self):
        """Unclaimed work is reported."""
        tracker = RestrictionTracker(Restriction(1, 4))
        tracker.try_claim(1)
        with pytest.raises(ValueError, match="Chunk 2"):
            tracker.check_done()

    def test_progress(self):
        """Progress counts claimed and unclaimed indices."""
        tracker = RestrictionTracker(Restriction(5, 10))
        assert tracker.progress() == Progress(completed=0, remaining=5)
        tracker.try_claim(5)
        tracker.try_claim(6)
        assert tracker.progress() == Progress(completed=2, remaining=3)
