'''The election as a whole: the public operations and their guards.

An :class:`ElectionCoordinator` ties together the election setup, the phase
controller, the eligibility registry and the tally. Each mutating operation
checks its guards in a fixed order, so that the same invalid request always
gets the same error:

1.  caller authorization (chairman-only operations),
2.  election phase,
3.  voting time window,
4.  eligibility of the voter and whether they already voted,
5.  candidate index bounds.

The checks and the mutation run under one exclusive lock, so no two
mutations interleave and no partial change is ever visible; a rejected
request leaves the election untouched. Queries share the lock among
themselves.

Callers are identified by opaque identities resolved by an external
authentication layer; the coordinator compares them but never authenticates
them.
'''

import logging
from numbers import Real
from typing import Any, Dict, Iterable, List, Optional, Union

from chairvote.candidate import Candidate
from chairvote.clock import Clock, default_clock
from chairvote.config import ElectionConfig
from chairvote.eligibility import EligibilityRegistry, VoterRecord
from chairvote.errors import AccessError, AlreadyVoted, StateError
from chairvote.events import (
    Event, EventLog, VoteCast, PeriodStarted, ElectionEnded, TieDetected,
    Subscriber
)
from chairvote.period import Phase, PeriodController
from chairvote.persist import to_dict
from chairvote.tally import Outcome, TallyEngine
from chairvote.util import ReadWriteLock

logger = logging.getLogger(__name__)


class ElectionCoordinator:
    '''A single-chairman election over a fixed candidate roster.

    :param config: Election setup.
    :param clock: A monotonic time source for the voting window.
    '''
    def __init__(self, config: ElectionConfig, clock: Clock = default_clock):
        self.config = config
        self.period = PeriodController(clock)
        self.registry = EligibilityRegistry(config)
        self.tally = TallyEngine(config.names)
        self.events = EventLog()
        self.round_number = 0
        self._lock = ReadWriteLock()

    @property
    def chairman(self) -> Any:
        return self.config.chairman

    @property
    def candidate_count(self) -> int:
        return self.config.n_candidates

    @property
    def phase(self) -> Phase:
        with self._lock.read_locked():
            return self.period.phase

    def subscribe(self, callback: Subscriber) -> None:
        '''Call the callback with every event emitted from now on.'''
        self.events.subscribe(callback)

    # Administrative operations
    def set_period(self, caller: Any, duration: Real) -> Optional[Event]:
        '''Set the voting window to start now and last duration seconds.

        Setting a period on an ended election starts a new round: all vote
        counts and has-voted flags are cleared, granted rights stay. If the
        election is configured to start automatically, voting opens at once.

        :param caller: Identity of the caller; must be the chairman.
        :param duration: Length of the window in seconds; must be positive.
        :returns: The :class:`PeriodStarted` event if voting opened
            automatically, None otherwise.
        :raises AccessError: If the caller is not the chairman.
        :raises StateError: If the election is not unconfigured or ended,
            new rounds are not allowed, or the duration is invalid.
        '''
        started = None
        with self._lock.write_locked():
            self._check_chairman(caller, 'set the voting period')
            new_round = self.period.phase == Phase.ENDED
            if new_round and not self.config.allow_new_rounds:
                raise StateError('new rounds are not allowed',
                                 self.period.phase)
            self.period.set_period(duration)
            if new_round:
                self.tally.reset_counts()
                self.registry.reset_round()
            self.round_number += 1
            logger.info('round %d configured', self.round_number)
            if self.config.auto_start:
                started = self._start()
        if started is not None:
            self.events.notify()
        return started

    def start(self, caller: Any) -> PeriodStarted:
        '''Open the voting.

        :raises AccessError: If the caller is not the chairman.
        :raises StateError: If the election is not configured or its window
            has not begun.
        '''
        with self._lock.write_locked():
            self._check_chairman(caller, 'start the voting')
            event = self._start()
        self.events.notify()
        return event

    def grant_right(self, caller: Any, identity: Any) -> None:
        '''Give an identity the right to vote, for this and later rounds.

        :raises AccessError: If the caller is not the chairman.
        :raises AlreadyGranted: If the identity already has the right.
        '''
        with self._lock.write_locked():
            self._check_chairman(caller, 'grant voting rights')
            self.registry.grant_right(identity)

    def end(self, caller: Any) -> Union[ElectionEnded, TieDetected]:
        '''Close the voting after its window elapsed and announce the result.

        :returns: :class:`ElectionEnded` with the winner, or
            :class:`TieDetected` if there is no single winner. An election
            without any votes ends with the first candidate and zero votes.
        :raises AccessError: If the caller is not the chairman.
        :raises StateError: If voting is not active or still in its window.
        '''
        with self._lock.write_locked():
            self._check_chairman(caller, 'end the voting')
            self.period.check_endable()
            outcome = self.tally.compute_outcome()
            self.period.end()
            if outcome.is_tie:
                event = TieDetected(outcome.winner_vote_count,
                                    self.round_number)
                logger.info('round %d ended in a tie at %d votes',
                            self.round_number, outcome.winner_vote_count)
            else:
                name = self.config.names[outcome.winner_index]
                event = ElectionEnded(outcome.winner_index, name,
                                      outcome.winner_vote_count,
                                      self.round_number)
                logger.info('round %d won by %s with %d votes',
                            self.round_number, name,
                            outcome.winner_vote_count)
            self.events.append(event)
        self.events.notify()
        return event

    # Participant operations
    def vote(self, caller: Any, index: int) -> VoteCast:
        '''Cast the caller's vote for the candidate at index.

        :raises StateError: If voting is not active or the clock is outside
            the voting window.
        :raises AccessError: If the caller has no right to vote.
        :raises AlreadyVoted: If the caller already voted in this round.
        :raises CandidateIndexError: If the index is not on the roster.
        '''
        with self._lock.write_locked():
            if self.period.phase != Phase.ACTIVE:
                raise StateError('voting is not active', self.period.phase)
            if not self.period.in_window():
                raise StateError('outside the voting period',
                                 self.period.phase)
            if not self.registry.check_eligible(caller):
                raise AccessError(caller, 'vote', 'no right to vote')
            if not self.registry.check_not_yet_voted(caller):
                raise AlreadyVoted(caller)
            self.tally.check_index(index)
            self.tally.cast_vote(index)
            self.registry.record_vote(caller, index)
            event = VoteCast(caller, index, self.round_number)
            self.events.append(event)
            logger.debug('%r voted in round %d', caller, self.round_number)
        self.events.notify()
        return event

    # Queries
    def get_candidate(self, index: int) -> Candidate:
        '''Return a copy of the candidate at index with its vote count.

        :raises CandidateIndexError: If the index is not on the roster.
        '''
        with self._lock.read_locked():
            return self.tally.candidate(index)

    def is_open(self) -> bool:
        with self._lock.read_locked():
            return self.period.is_open()

    def elapsed_time(self) -> Real:
        '''Return seconds since the voting window began.

        :raises StateError: If voting has not been started.
        '''
        with self._lock.read_locked():
            return self.period.elapsed_time()

    def remaining_time(self) -> Real:
        with self._lock.read_locked():
            return self.period.remaining_time()

    def voter_record(self, identity: Any) -> VoterRecord:
        '''Return the record of an identity; unknown ones read as default.'''
        with self._lock.read_locked():
            return self.registry.record(identity)

    def results(self) -> List[Candidate]:
        with self._lock.read_locked():
            return self.tally.candidates()

    def outcome(self) -> Outcome:
        '''Return the outcome the votes counted so far would give.'''
        with self._lock.read_locked():
            return self.tally.compute_outcome()

    def history(self) -> List[Event]:
        with self._lock.read_locked():
            return self.events.history()

    def snapshot(self) -> Dict[str, Any]:
        '''Return the whole election state as a JSON-ready dictionary.'''
        with self._lock.read_locked():
            return {
                'config': to_dict(self.config),
                'phase': to_dict(self.period.phase),
                'round_number': self.round_number,
                'start_time': self.period.start_time,
                'end_time': self.period.end_time,
                'candidates': to_dict(self.tally.candidates()),
                'voters': to_dict(self.registry.records()),
                'outcome': to_dict(self.tally.compute_outcome()),
            }

    def _check_chairman(self, caller: Any, operation: str) -> None:
        if not self.config.is_chairman(caller):
            raise AccessError(caller, operation, 'chairman only')

    def _start(self) -> PeriodStarted:
        self.period.start()
        event = PeriodStarted(self.period.start_time, self.period.end_time,
                              self.round_number)
        self.events.append(event)
        return event

    def __repr__(self) -> str:
        return (
            f'<ElectionCoordinator({self.candidate_count} candidates,'
            f' {self.period.phase}, round {self.round_number})>'
        )


def configure_election(names: Iterable[str],
                       chairman: Any,
                       chairman_may_vote: bool = False,
                       auto_start: bool = False,
                       allow_new_rounds: bool = True,
                       clock: Clock = default_clock,
                       ) -> ElectionCoordinator:
    '''Set up a new election chaired by the creating caller.

    :param names: Candidate names in ballot order; at least two.
    :param chairman: Identity of the caller creating the election.
    :param chairman_may_vote: Whether the chairman may vote without a grant.
    :param auto_start: Whether setting the period opens voting at once.
    :param allow_new_rounds: Whether the election may be reset after ending.
    :param clock: A monotonic time source for the voting window.
    :raises ConfigurationError: If the roster is invalid.
    '''
    config = ElectionConfig(
        names,
        chairman,
        chairman_may_vote=chairman_may_vote,
        auto_start=auto_start,
        allow_new_rounds=allow_new_rounds,
    )
    logger.info('election configured with %d candidates',
                config.n_candidates)
    return ElectionCoordinator(config, clock=clock)
