
import sys
import os
import random

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import chairvote.tally
from chairvote.errors import CandidateIndexError
from chairvote.tally import Outcome, TallyEngine, compute_outcome


@pytest.mark.parametrize(('counts', 'expected'), [
    ([5, 3, 2], (0, 5, False)),
    ([0, 0, 0], (0, 0, False)),
    ([1, 2, 0], (1, 2, False)),
    ([0, 0, 1], (2, 1, False)),
    ([2, 5, 5, 7], (3, 7, False)),
    ([3, 3], (0, 3, True)),
    ([1, 3, 2, 3], (1, 3, True)),
    ([0, 1, 0, 1, 0], (1, 1, True)),
])
def test_compute_outcome(counts, expected):
    assert compute_outcome(counts) == expected


def test_compute_outcome_tie():
    outcome = compute_outcome([4, 4, 1])
    assert outcome.is_tie
    assert outcome.winner_vote_count == 4


def test_outcome_no_votes():
    outcome = compute_outcome([0, 0])
    assert not outcome.is_tie
    assert not outcome.has_votes


def test_outcome_matches_max():
    rng = random.Random(1711)
    for i in range(200):
        counts = [rng.randrange(5) for j in range(rng.randrange(2, 7))]
        outcome = compute_outcome(counts)
        best = max(counts)
        assert outcome.winner_vote_count == best
        if best > 0:
            assert outcome.is_tie == (counts.count(best) > 1)
            assert outcome.winner_index == counts.index(best)
        else:
            assert outcome == (0, 0, False)


def test_outcome_to_dict():
    assert Outcome(1, 2, False).to_dict() == {
        'class': 'Outcome',
        'winner_index': 1,
        'winner_vote_count': 2,
        'is_tie': False,
    }


def test_cast_vote():
    tally = TallyEngine(['A', 'B', 'C'])
    tally.cast_vote(1)
    tally.cast_vote(1)
    tally.cast_vote(2)
    assert tally.counts() == [0, 2, 1]
    assert tally.total_votes() == 3
    assert tally.candidate(1).vote_count == 2
    assert tally.compute_outcome() == (1, 2, False)


@pytest.mark.parametrize('index', [-1, 3, 10, 1.0, '1', None, True])
def test_cast_vote_out_of_range(index):
    tally = TallyEngine(['A', 'B', 'C'])
    with pytest.raises(CandidateIndexError):
        tally.cast_vote(index)
    assert tally.counts() == [0, 0, 0]


def test_index_error_is_builtin():
    tally = TallyEngine(['A', 'B'])
    with pytest.raises(IndexError):
        tally.candidate(2)


def test_reset_counts():
    tally = TallyEngine(['A', 'B'])
    tally.cast_vote(0)
    tally.cast_vote(1)
    tally.reset_counts()
    assert tally.counts() == [0, 0]
    assert [cand.name for cand in tally.candidates()] == ['A', 'B']


def test_candidates_are_copies():
    tally = TallyEngine(['A', 'B'])
    tally.candidates()[0].vote_count = 10
    assert tally.counts() == [0, 0]
