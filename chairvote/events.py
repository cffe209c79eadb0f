'''Events emitted by successful election operations, and their log.

Every operation that changes the election state produces an event once it
has succeeded. The :class:`EventLog` keeps the full history in order and
passes each event to subscribed callbacks.
'''

import collections
import logging
import threading
from numbers import Real
from typing import Any, Callable, Deque, List

from chairvote.persist import simple_serialization

logger = logging.getLogger(__name__)


class Event:
    '''Base class for election events.'''
    round_number: int = NotImplemented


@simple_serialization
class VoteCast(Event):
    '''An identity voted for a candidate.'''
    def __init__(self, identity: Any, candidate_index: int,
                 round_number: int = 1):
        self.identity = identity
        self.candidate_index = candidate_index
        self.round_number = round_number

    def __repr__(self) -> str:
        return f'<VoteCast({self.identity!r},{self.candidate_index})>'


@simple_serialization
class PeriodStarted(Event):
    '''Voting was opened for the window from start to end.'''
    def __init__(self, start: Real, end: Real, round_number: int = 1):
        self.start = start
        self.end = end
        self.round_number = round_number

    def __repr__(self) -> str:
        return f'<PeriodStarted({self.start},{self.end})>'


@simple_serialization
class ElectionEnded(Event):
    '''Voting was closed and a single winner determined.

    :param winner_index: Roster index of the winner.
    :param name: Name of the winner.
    :param count: Number of votes the winner received.
    '''
    def __init__(self, winner_index: int, name: str, count: int,
                 round_number: int = 1):
        self.winner_index = winner_index
        self.name = name
        self.count = count
        self.round_number = round_number

    def __repr__(self) -> str:
        return f'<ElectionEnded({self.winner_index},{self.name},{self.count})>'


@simple_serialization
class TieDetected(Event):
    '''Voting was closed with two or more candidates sharing the maximum.

    :param count: The shared highest vote count.
    '''
    def __init__(self, count: int = 0, round_number: int = 1):
        self.count = count
        self.round_number = round_number

    def __repr__(self) -> str:
        return f'<TieDetected({self.count})>'


Subscriber = Callable[[Event], Any]


class EventLog:
    '''Ordered history of election events with subscriber notification.

    Appending and notifying are separate steps so that the coordinator can
    record events while holding its lock and notify once it is released.
    Appended events wait in a queue until some thread notifies; subscribers
    always receive them in the order of the history, whichever thread
    delivers them.
    A subscriber may itself perform election operations; the events these
    produce are delivered after the one being handled.
    '''
    def __init__(self):
        self._events: List[Event] = []
        self._pending: Deque[Event] = collections.deque()
        self._dispatch_lock = threading.RLock()
        self._dispatching = False
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        self._subscribers.remove(callback)

    def append(self, event: Event) -> None:
        self._events.append(event)
        self._pending.append(event)

    def notify(self) -> None:
        '''Pass all events not yet delivered to all subscribers, in order.

        A failing subscriber is logged and does not prevent the others from
        being notified; the operation that produced the event has already
        taken effect.
        '''
        with self._dispatch_lock:
            # re-entered from a subscriber; the outer call drains the queue
            if self._dispatching:
                return
            self._dispatching = True
            try:
                while self._pending:
                    event = self._pending.popleft()
                    for callback in list(self._subscribers):
                        try:
                            callback(event)
                        except Exception:
                            logger.exception(
                                'event subscriber %r failed on %r',
                                callback, event
                            )
            finally:
                self._dispatching = False

    def history(self) -> List[Event]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(self.history())
