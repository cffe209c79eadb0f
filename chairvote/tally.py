'''Vote counting and winner determination.

The winner is found by :func:`compute_outcome`, a single scan over the vote
counts in roster order. The first candidate to reach the highest count is
the provisional winner; any later candidate matching a positive maximum
makes the outcome a tie, and a later candidate exceeding it clears the tie.
When nobody got any vote, the outcome is not a tie but a no-votes result
pointing at the first candidate with zero votes.
'''

import logging
from typing import List, Sequence, Tuple

from chairvote.candidate import Candidate
from chairvote.errors import CandidateIndexError
from chairvote.persist import simple_serialization

logger = logging.getLogger(__name__)


@simple_serialization
class Outcome:
    '''Result of the winner determination.

    :param winner_index: Roster index of the winner. Meaningless if
        ``is_tie``.
    :param winner_vote_count: Highest vote count reached.
    :param is_tie: Whether two or more candidates share the highest count.
    '''
    def __init__(self,
                 winner_index: int,
                 winner_vote_count: int,
                 is_tie: bool,
                 ):
        self.winner_index = winner_index
        self.winner_vote_count = winner_vote_count
        self.is_tie = is_tie

    @property
    def has_votes(self) -> bool:
        return self.winner_vote_count > 0

    def as_tuple(self) -> Tuple[int, int, bool]:
        return self.winner_index, self.winner_vote_count, self.is_tie

    def __eq__(self, other) -> bool:
        if isinstance(other, Outcome):
            return self.as_tuple() == other.as_tuple()
        elif isinstance(other, tuple):
            return self.as_tuple() == other
        return NotImplemented

    def __repr__(self) -> str:
        if self.is_tie:
            return f'<Outcome(tie at {self.winner_vote_count})>'
        return (
            f'<Outcome(winner {self.winner_index}'
            f' with {self.winner_vote_count})>'
        )


def compute_outcome(counts: Sequence[int]) -> Outcome:
    '''Determine the winner from vote counts listed in roster order.

    :param counts: Vote counts of the candidates.
    :returns: The winner index and count, and whether there is a tie.
    '''
    max_count = 0
    winner_index = 0
    is_tie = False
    for i, count in enumerate(counts):
        if count > max_count:
            max_count = count
            winner_index = i
            is_tie = False
        elif count == max_count and max_count > 0:
            is_tie = True
    return Outcome(winner_index, max_count, is_tie)


class TallyEngine:
    '''Vote counts for a fixed roster of candidates.

    :param names: Candidate names in roster order.
    '''
    def __init__(self, names: Sequence[str]):
        self._candidates = [Candidate(name) for name in names]

    @property
    def n_candidates(self) -> int:
        return len(self._candidates)

    def check_index(self, index: int) -> None:
        '''Raise CandidateIndexError if index is not on the roster.'''
        if (
            not isinstance(index, int)
            or isinstance(index, bool)
            or not 0 <= index < len(self._candidates)
        ):
            raise CandidateIndexError(index, len(self._candidates))

    def cast_vote(self, index: int) -> None:
        self.check_index(index)
        self._candidates[index].vote_count += 1
        logger.debug('vote counted for %s', self._candidates[index].name)

    def candidate(self, index: int) -> Candidate:
        '''Return a copy of the candidate at index.'''
        self.check_index(index)
        return self._candidates[index].copy()

    def candidates(self) -> List[Candidate]:
        return [cand.copy() for cand in self._candidates]

    def counts(self) -> List[int]:
        return [cand.vote_count for cand in self._candidates]

    def total_votes(self) -> int:
        return sum(self.counts())

    def compute_outcome(self) -> Outcome:
        return compute_outcome(self.counts())

    def reset_counts(self) -> None:
        for cand in self._candidates:
            cand.vote_count = 0
