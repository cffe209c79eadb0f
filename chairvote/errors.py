'''Errors raised by election operations.

Every rejection of an election request is a subclass of
:class:`ElectionError`. The errors are raised before any state is touched, so
a caught error always means the election is exactly as it was before the
request; retrying is up to the caller.
'''

from typing import Any, Optional


class ElectionError(Exception):
    '''A request to the election was rejected.'''
    pass


class ConfigurationError(ElectionError):
    '''The election cannot be set up with the given parameters.

    E.g. too few candidates or a candidate name over the length limit.
    '''
    pass


class AccessError(ElectionError):
    '''The caller is not allowed to perform the operation.

    :param caller: Identity of the rejected caller.
    :param operation: Name of the operation that was requested.
    :param reason: What the caller lacks, if more specific than the default.
    '''
    def __init__(self,
                 caller: Any,
                 operation: str,
                 reason: Optional[str] = None,
                 ):
        self.caller = caller
        self.operation = operation
        message = f'{caller!r} may not {operation}'
        if reason:
            message += f': {reason}'
        super().__init__(message)


class StateError(ElectionError):
    '''The election is in the wrong phase or outside the voting window.

    :param message: Description of the conflict.
    :param phase: Phase the election was in when the request arrived.
    '''
    def __init__(self, message: str, phase: Any = None):
        self.phase = phase
        if phase is not None:
            message += f' (phase: {phase})'
        super().__init__(message)


class AlreadyGranted(ElectionError):
    '''The identity already holds the right to vote.'''
    def __init__(self, identity: Any):
        self.identity = identity
        super().__init__(f'{identity!r} already has the right to vote')


class AlreadyVoted(ElectionError):
    '''The identity has already voted in this round.'''
    def __init__(self, identity: Any):
        self.identity = identity
        super().__init__(f'{identity!r} has already voted')


class CandidateIndexError(ElectionError, IndexError):
    '''A candidate index is outside the roster.

    :param index: The invalid index.
    :param n_candidates: Number of candidates on the roster.
    '''
    def __init__(self, index: Any, n_candidates: int):
        self.index = index
        self.n_candidates = n_candidates
        super().__init__(
            f'invalid candidate index: {index}, must be'
            f' >=0 and <{n_candidates}'
        )
