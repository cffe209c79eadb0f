'''Voting rights and has-voted tracking per identity.'''

import logging
from typing import Any, Dict, Optional

from chairvote.config import ElectionConfig
from chairvote.errors import AlreadyGranted
from chairvote.persist import simple_serialization

logger = logging.getLogger(__name__)


@simple_serialization
class VoterRecord:
    '''What the election knows about one identity.

    :param can_vote: Whether the chairman granted the right to vote.
    :param has_voted: Whether a vote was recorded in the current round.
    :param chosen_index: Index of the candidate voted for, if any.
    '''
    def __init__(self,
                 can_vote: bool = False,
                 has_voted: bool = False,
                 chosen_index: Optional[int] = None,
                 ):
        self.can_vote = can_vote
        self.has_voted = has_voted
        self.chosen_index = chosen_index

    def copy(self) -> 'VoterRecord':
        return VoterRecord(self.can_vote, self.has_voted, self.chosen_index)

    def __eq__(self, other) -> bool:
        if not isinstance(other, VoterRecord):
            return NotImplemented
        return (
            (self.can_vote, self.has_voted, self.chosen_index)
            == (other.can_vote, other.has_voted, other.chosen_index)
        )

    def __repr__(self) -> str:
        return (
            f'<VoterRecord(can_vote={self.can_vote},'
            f'has_voted={self.has_voted},chosen_index={self.chosen_index})>'
        )


class EligibilityRegistry:
    '''Registry of voter records keyed by identity.

    Identities never seen read as a default record (no right to vote, not
    voted); reading does not add them to the registry.

    :param config: Election setup, for the chairman voting policy.
    '''
    def __init__(self, config: ElectionConfig):
        self.config = config
        self._records: Dict[Any, VoterRecord] = {}

    def record(self, identity: Any) -> VoterRecord:
        '''Return a copy of the record for the identity.'''
        record = self._records.get(identity)
        if record is None:
            return VoterRecord()
        return record.copy()

    def grant_right(self, identity: Any) -> None:
        '''Give the identity the right to vote.

        :raises AlreadyGranted: If the identity already has it.
        '''
        record = self._records.setdefault(identity, VoterRecord())
        if record.can_vote:
            raise AlreadyGranted(identity)
        record.can_vote = True
        logger.debug('right to vote granted to %r', identity)

    def check_eligible(self, identity: Any) -> bool:
        if self.config.is_chairman(identity) and self.config.chairman_may_vote:
            return True
        record = self._records.get(identity)
        return record is not None and record.can_vote

    def check_not_yet_voted(self, identity: Any) -> bool:
        record = self._records.get(identity)
        return record is None or not record.has_voted

    def record_vote(self, identity: Any, index: int) -> None:
        '''Mark the identity as having voted for the candidate at index.

        Does not check anything; the caller must check eligibility and
        previous votes in the same atomic step.
        '''
        record = self._records.setdefault(identity, VoterRecord())
        record.has_voted = True
        record.chosen_index = index

    def reset_round(self) -> None:
        '''Forget all votes of the round, keeping the granted rights.'''
        for identity, record in list(self._records.items()):
            if record.can_vote:
                record.has_voted = False
                record.chosen_index = None
            else:
                del self._records[identity]

    def voter_count(self) -> int:
        '''Return the number of identities that voted in the round.'''
        return sum(1 for record in self._records.values() if record.has_voted)

    def records(self) -> Dict[Any, VoterRecord]:
        return {
            identity: record.copy()
            for identity, record in self._records.items()
        }
