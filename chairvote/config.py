'''Fixed setup of an election: roster, chairman and voting policy.'''

from typing import Any, Iterable, Tuple

from chairvote.candidate import validate_name
from chairvote.errors import ConfigurationError
from chairvote.persist import simple_serialization


MIN_CANDIDATES: int = 2


@simple_serialization
class ElectionConfig:
    '''Immutable election setup.

    The chairman is the identity that created the election; it is the only
    one allowed to run it. Whether the chairman may vote is fixed here, as are
    the options on which election variants differ.

    :param names: Candidate names in ballot order; at least
        :data:`MIN_CANDIDATES` of them.
    :param chairman: Identity of the creating caller. Any hashable value
        issued by the authentication layer.
    :param chairman_may_vote: Whether the chairman is eligible to vote
        without an explicit grant.
    :param auto_start: Whether setting the voting period opens the voting
        immediately, without a separate start call.
    :param allow_new_rounds: Whether an ended election can be reset for
        another round over the same roster.
    :raises ConfigurationError: If there are too few candidates or a name is
        invalid.
    '''
    serialize_params = [
        'names', 'chairman', 'chairman_may_vote', 'auto_start',
        'allow_new_rounds',
    ]

    def __init__(self,
                 names: Iterable[str],
                 chairman: Any,
                 chairman_may_vote: bool = False,
                 auto_start: bool = False,
                 allow_new_rounds: bool = True,
                 ):
        if isinstance(names, str):
            raise ConfigurationError(
                f'candidate names must be a list of strings, got {names!r}'
            )
        names = tuple(validate_name(name) for name in names)
        if len(names) < MIN_CANDIDATES:
            raise ConfigurationError(
                f'too few candidates: {len(names)},'
                f' must be >={MIN_CANDIDATES}'
            )
        try:
            hash(chairman)
        except TypeError as e:
            raise ConfigurationError(
                f'chairman identity must be hashable: {chairman!r}'
            ) from e
        self._names = names
        self._chairman = chairman
        self._chairman_may_vote = bool(chairman_may_vote)
        self._auto_start = bool(auto_start)
        self._allow_new_rounds = bool(allow_new_rounds)

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def chairman(self) -> Any:
        return self._chairman

    @property
    def chairman_may_vote(self) -> bool:
        return self._chairman_may_vote

    @property
    def auto_start(self) -> bool:
        return self._auto_start

    @property
    def allow_new_rounds(self) -> bool:
        return self._allow_new_rounds

    @property
    def n_candidates(self) -> int:
        return len(self._names)

    def is_chairman(self, identity: Any) -> bool:
        return identity == self._chairman

    def __repr__(self) -> str:
        return (
            f'<ElectionConfig({len(self._names)} candidates,'
            f' chairman={self._chairman!r})>'
        )
