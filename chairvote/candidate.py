'''Candidates standing in the election and candidate name validation.'''

from chairvote.errors import ConfigurationError
from chairvote.persist import simple_serialization


MAX_NAME_BYTES: int = 32
'''Longest candidate name allowed, in bytes of its UTF-8 encoding.'''


def validate_name(name: str) -> str:
    '''Check that a candidate name is a string within the length limit.

    Names over the limit are rejected, never truncated.

    :param name: Candidate name to check.
    :returns: The name unchanged.
    :raises ConfigurationError: If the name is not a string or is too long.
    '''
    if not isinstance(name, str):
        raise ConfigurationError(
            f'invalid candidate name: {name!r}, must be a string'
        )
    n_bytes = len(name.encode('utf8'))
    if n_bytes > MAX_NAME_BYTES:
        raise ConfigurationError(
            f'candidate name too long: {name!r} has {n_bytes} bytes,'
            f' must be <={MAX_NAME_BYTES}'
        )
    return name


@simple_serialization
class Candidate:
    '''A candidate on the election roster with its current vote count.

    :param name: Name of the candidate, at most :data:`MAX_NAME_BYTES` bytes
        long in UTF-8.
    :param vote_count: Number of votes received so far in the round.
    '''
    def __init__(self, name: str, vote_count: int = 0):
        self._name = validate_name(name)
        self.vote_count = vote_count

    @property
    def name(self) -> str:
        return self._name

    def copy(self) -> 'Candidate':
        return Candidate(self._name, self.vote_count)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return (self.name, self.vote_count) == (other.name, other.vote_count)

    def __repr__(self) -> str:
        return f'<Candidate({self.name},{self.vote_count})>'
