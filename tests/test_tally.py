"""
Tally & Tie-Break Test Suite

Coverage:
  - compute_tied_winners: running maximum, ties, all-zero and empty tallies
  - choose_winner: single winner, draw modulo tied count
  - Randomness sources: timestamp hash, system CSPRNG, fixed draw, factory
  - Workflow status transition table
"""

import hashlib
import os
import sys

import pytest

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from evote.constants import (
    ELECTION_TIE_BREAK_DIGEST_SIZE,
    ELECTION_TIE_BREAK_DOMAIN,
)
from evote.election import (
    FixedRandomness,
    ManualClock,
    SystemRandomness,
    TimestampHashRandomness,
    WorkflowStatus,
    choose_winner,
    compute_tied_winners,
    make_randomness,
    next_status,
)
from evote.exceptions import ConfigurationError, NoVotesCastError


# ══════════════════════════════════════════════════════════════════════
#  TIE COMPUTATION
# ══════════════════════════════════════════════════════════════════════

class TestComputeTiedWinners:

    def test_single_leader(self):
        assert compute_tied_winners([1, 4, 2]) == (4, [1])

    def test_tie_in_index_order(self):
        assert compute_tied_winners([3, 1, 3, 0, 3]) == (3, [0, 2, 4])

    def test_higher_count_discards_earlier_tie(self):
        assert compute_tied_winners([2, 2, 5]) == (5, [2])

    def test_later_tie_after_new_maximum(self):
        assert compute_tied_winners([1, 1, 4, 0, 4]) == (4, [2, 4])

    def test_all_zero(self):
        assert compute_tied_winners([0, 0, 0]) == (0, [0, 1, 2])

    def test_single_proposal_without_votes(self):
        assert compute_tied_winners([0]) == (0, [0])

    def test_no_proposals(self):
        assert compute_tied_winners([]) == (0, [])

    def test_accepts_generator(self):
        assert compute_tied_winners(c for c in (0, 2, 2)) == (2, [1, 2])


# ══════════════════════════════════════════════════════════════════════
#  WINNER SELECTION
# ══════════════════════════════════════════════════════════════════════

class TestChooseWinner:

    def test_single_tied_index_skips_draw(self):
        source = FixedRandomness(3)
        assert choose_winner([4], source) == 4
        assert source.calls == 0

    def test_draw_modulo_tied_count(self):
        tied = [1, 3, 6]
        assert choose_winner(tied, FixedRandomness(0)) == 1
        assert choose_winner(tied, FixedRandomness(4)) == 3
        assert choose_winner(tied, FixedRandomness(2 ** 255 + 2)) == tied[(2 ** 255 + 2) % 3]

    def test_draws_once(self):
        source = FixedRandomness(1)
        choose_winner([0, 1], source)
        assert source.calls == 1

    def test_empty_raises(self):
        with pytest.raises(NoVotesCastError):
            choose_winner([], FixedRandomness(0))


# ══════════════════════════════════════════════════════════════════════
#  RANDOMNESS SOURCES
# ══════════════════════════════════════════════════════════════════════

class TestTimestampHashRandomness:

    def test_hash_of_instant(self):
        clock = ManualClock(1_700_000_000.5)
        expected = int.from_bytes(
            hashlib.blake2b(
                ELECTION_TIE_BREAK_DOMAIN + b"1700000000.5",
                digest_size=ELECTION_TIE_BREAK_DIGEST_SIZE,
            ).digest(),
            "big",
        )
        assert TimestampHashRandomness(clock).draw() == expected

    def test_same_instant_same_draw(self):
        clock = ManualClock(1234.0)
        source = TimestampHashRandomness(clock)
        assert source.draw() == source.draw()

    def test_draw_changes_with_time(self):
        clock = ManualClock(1234.0)
        source = TimestampHashRandomness(clock)
        first = source.draw()
        clock.advance(1)
        assert source.draw() != first

    def test_default_clock(self):
        assert TimestampHashRandomness().draw() >= 0


class TestOtherSources:

    def test_system_randomness_range(self):
        source = SystemRandomness()
        for _ in range(20):
            assert 0 <= source.draw() < 2 ** (ELECTION_TIE_BREAK_DIGEST_SIZE * 8)

    def test_fixed_randomness(self):
        source = FixedRandomness(9)
        assert [source.draw() for _ in range(3)] == [9, 9, 9]
        assert source.calls == 3

    def test_fixed_randomness_rejects_negative(self):
        with pytest.raises(ValueError):
            FixedRandomness(-1)

    def test_factory(self):
        clock = ManualClock(10.0)
        assert isinstance(make_randomness("timestamp", clock), TimestampHashRandomness)
        assert isinstance(make_randomness("system"), SystemRandomness)

    def test_factory_unknown_raises(self):
        with pytest.raises(ConfigurationError, match="tie_break"):
            make_randomness("dice")


class TestManualClock:

    def test_advance_and_set(self):
        clock = ManualClock(5.0)
        assert clock.advance(2.5) == 7.5
        clock.set(10.0)
        assert clock.now() == 10.0

    def test_cannot_go_backwards(self):
        clock = ManualClock(5.0)
        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.set(4.0)


# ══════════════════════════════════════════════════════════════════════
#  STATUS TABLE
# ══════════════════════════════════════════════════════════════════════

class TestWorkflowStatus:

    def test_values_are_ordered(self):
        assert [s.value for s in WorkflowStatus] == [0, 1, 2, 3, 4, 5]

    def test_next_status_chain(self):
        chain = [WorkflowStatus.REGISTERING_VOTERS]
        while (nxt := next_status(chain[-1])) is not None:
            chain.append(nxt)
        assert chain[-1] == WorkflowStatus.VOTING_SESSION_ENDED
        assert len(chain) == 5

    def test_no_advance_from_closing_phases(self):
        assert next_status(WorkflowStatus.VOTING_SESSION_ENDED) is None
        assert next_status(WorkflowStatus.VOTES_TALLIED) is None
