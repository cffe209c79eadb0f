'''Time sources for the voting window.

A clock is any callable taking no arguments and returning the current time
in seconds as a number that never decreases; :func:`time.monotonic` is the
default. :class:`ManualClock` is a clock that only moves when told to, for
simulated elections and tests.
'''

import time
from numbers import Real
from typing import Callable

Clock = Callable[[], Real]

default_clock: Clock = time.monotonic


class ManualClock:
    '''A clock that moves only when advanced.

    :param start: Initial reading of the clock.
    '''
    def __init__(self, start: Real = 0):
        self.now = start

    def __call__(self) -> Real:
        return self.now

    def advance(self, seconds: Real) -> Real:
        '''Move the clock forward and return the new reading.

        :param seconds: How far to move; must not be negative.
        :raises ValueError: If asked to move backwards.
        '''
        if seconds < 0:
            raise ValueError(f'cannot move a clock backwards: {seconds}')
        self.now += seconds
        return self.now

    def __repr__(self) -> str:
        return f'<ManualClock({self.now})>'
