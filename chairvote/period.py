'''Election phases and the voting window.

The phase moves ``UNCONFIGURED -> CONFIGURED -> ACTIVE -> ENDED`` and from
``ENDED`` back to ``CONFIGURED`` when a new round is set up. Voting is open
only when two separate gates both hold: the administrative one (the phase is
``ACTIVE``) and the time one (the clock is within the window).

The controller does not check who is calling; that is the job of the
coordinator.
'''

import enum
import logging
import math
from numbers import Real
from typing import Optional

from chairvote.clock import Clock, default_clock
from chairvote.errors import StateError

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    UNCONFIGURED = 'unconfigured'
    CONFIGURED = 'configured'
    ACTIVE = 'active'
    ENDED = 'ended'

    def __str__(self) -> str:
        return self.value


class PeriodController:
    '''Phase state machine with time-window gating.

    :param clock: A monotonic time source, see :mod:`chairvote.clock`.
    '''
    def __init__(self, clock: Clock = default_clock):
        self.clock = clock
        self.phase = Phase.UNCONFIGURED
        self.start_time: Optional[Real] = None
        self.end_time: Optional[Real] = None

    def set_period(self, duration: Real) -> None:
        '''Set the voting window to start now and last for duration seconds.

        :raises StateError: If the election is not unconfigured or ended, or
            if the duration is not a positive finite number.
        '''
        if self.phase not in (Phase.UNCONFIGURED, Phase.ENDED):
            raise StateError('voting period cannot be set now', self.phase)
        if (
            not isinstance(duration, Real)
            or isinstance(duration, bool)
            or not math.isfinite(duration)
            or not duration > 0
        ):
            raise StateError(
                f'invalid voting period duration: {duration!r},'
                ' must be a finite number >0'
            )
        now = self.clock()
        self.start_time = now
        self.end_time = now + duration
        self.phase = Phase.CONFIGURED
        logger.info('voting period set: %s to %s', self.start_time,
                    self.end_time)

    def check_startable(self) -> None:
        if self.phase != Phase.CONFIGURED:
            raise StateError('voting cannot be started now', self.phase)
        if self.clock() < self.start_time:
            raise StateError('voting period has not begun yet', self.phase)

    def start(self) -> None:
        '''Activate voting.

        :raises StateError: If the election is not configured or the window
            has not begun.
        '''
        self.check_startable()
        self.phase = Phase.ACTIVE
        logger.info('voting started')

    def in_window(self) -> bool:
        '''Return True if the clock is within the voting window.'''
        if self.start_time is None:
            return False
        return self.start_time <= self.clock() <= self.end_time

    def is_open(self) -> bool:
        '''Return True if votes can be cast right now.'''
        return self.phase == Phase.ACTIVE and self.in_window()

    def check_endable(self) -> None:
        if self.phase != Phase.ACTIVE:
            raise StateError('voting cannot be ended now', self.phase)
        if self.clock() < self.end_time:
            raise StateError('voting period has not elapsed yet', self.phase)

    def end(self) -> None:
        '''Close the voting once the window has elapsed.

        :raises StateError: If voting is not active or the window is still
            running.
        '''
        self.check_endable()
        self.phase = Phase.ENDED
        logger.info('voting ended')

    def elapsed_time(self) -> Real:
        '''Return the number of seconds since the start of the window.

        :raises StateError: If voting has not been started.
        '''
        if self.phase not in (Phase.ACTIVE, Phase.ENDED):
            raise StateError('not started', self.phase)
        return self.clock() - self.start_time

    def remaining_time(self) -> Real:
        '''Return the number of seconds until the end of the window.

        Zero when no window is set or once it is past.
        '''
        if self.end_time is None:
            return 0
        return max(0, self.end_time - self.clock())
