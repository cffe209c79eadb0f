'''Election scripts: a whole election described as a JSON document.

A script sets up the election and lists the actions to perform on it in
order, with a simulated clock standing in for real time::

    {
        "candidates": ["Alice", "Bob"],
        "chairman": "chair",
        "chairman_may_vote": true,
        "actions": [
            {"action": "set_period", "duration": 3600},
            {"action": "start"},
            {"action": "grant", "identity": "carol"},
            {"action": "vote", "caller": "carol", "index": 1},
            {"action": "advance", "seconds": 3601},
            {"action": "end"}
        ]
    }

Administrative actions are performed by the chairman unless the action names
another ``caller``. An action the election rejects is logged and skipped, as
a real client would see its request refused and carry on.
'''

import dataclasses
import json
import logging
from typing import Any, Dict, List, Optional, TextIO, Tuple

from chairvote.clock import ManualClock
from chairvote.coordinator import ElectionCoordinator, configure_election
from chairvote.errors import ElectionError

logger = logging.getLogger(__name__)


class ScriptError(Exception):
    '''An election script is malformed.

    :param message: What is wrong.
    :param step: Zero-based position of the offending action, if any.
    '''
    def __init__(self, message: str, step: Optional[int] = None):
        self.step = step
        if step is not None:
            message = f'action {step}: {message}'
        super().__init__(message)


@dataclasses.dataclass
class ElectionScript:
    """Election setup and the list of actions to run on it."""
    candidates: List[str]
    chairman: Any
    chairman_may_vote: bool = False
    auto_start: bool = False
    allow_new_rounds: bool = True
    actions: List[Dict[str, Any]] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class ScriptRun:
    """Outcome of running a script."""
    election: ElectionCoordinator
    clock: ManualClock
    rejected: List[Tuple[int, ElectionError]] = dataclasses.field(
        default_factory=list
    )


SETUP_KEYS: Tuple[str, ...] = (
    'candidates', 'chairman', 'chairman_may_vote', 'auto_start',
    'allow_new_rounds', 'actions',
)
NUMBER_PARAMS: Tuple[str, ...] = ('duration', 'seconds')
INTEGER_PARAMS: Tuple[str, ...] = ('index', )
IDENTITY_PARAMS: Tuple[str, ...] = ('caller', 'identity')


def parse(data: Any) -> ElectionScript:
    '''Build an election script from a JSON-like dictionary.

    :raises ScriptError: If required keys are missing or unknown ones are
        present, or if an action parameter has a wrong type.
    '''
    if not isinstance(data, dict):
        raise ScriptError(f'script must be an object, got {data!r}')
    unknown = set(data.keys()) - set(SETUP_KEYS)
    if unknown:
        raise ScriptError('unknown script keys: ' + ', '.join(sorted(unknown)))
    for key in ('candidates', 'chairman'):
        if key not in data:
            raise ScriptError(f'script must define {key}')
    actions = data.get('actions', [])
    if not isinstance(actions, list):
        raise ScriptError(f'actions must be a list, got {actions!r}')
    for i, action in enumerate(actions):
        if not isinstance(action, dict) or 'action' not in action:
            raise ScriptError('action must be an object with an action key', i)
        if action['action'] not in ACTIONS:
            raise ScriptError(
                f"unknown action {action['action']!r}, available: "
                + ', '.join(ACTIONS.keys()),
                i
            )
        _check_params(action, i)
    return ElectionScript(**data)


def load(file: TextIO) -> ElectionScript:
    try:
        data = json.load(file)
    except json.JSONDecodeError as e:
        raise ScriptError(f'invalid JSON: {e}') from e
    return parse(data)


def loads(text: str) -> ElectionScript:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScriptError(f'invalid JSON: {e}') from e
    return parse(data)


def run(script: ElectionScript, start_time: float = 0) -> ScriptRun:
    '''Set up the election of a script and perform its actions.

    :param script: The script to run.
    :param start_time: Initial reading of the simulated clock.
    :raises ConfigurationError: If the election setup is invalid.
    :raises ScriptError: If an action lacks its parameters or has them of
        a wrong type.
    '''
    clock = ManualClock(start_time)
    election = configure_election(
        script.candidates,
        script.chairman,
        chairman_may_vote=script.chairman_may_vote,
        auto_start=script.auto_start,
        allow_new_rounds=script.allow_new_rounds,
        clock=clock,
    )
    script_run = ScriptRun(election, clock)
    for i, action in enumerate(script.actions):
        performer = ACTIONS[action['action']]
        try:
            performer(script_run, action)
        except ElectionError as e:
            logger.warning('action %d (%s) rejected: %s',
                           i, action['action'], e)
            script_run.rejected.append((i, e))
        except KeyError as e:
            raise ScriptError(f'missing parameter {e}', i) from e
        except (TypeError, ValueError) as e:
            raise ScriptError(str(e), i) from e
    return script_run


def _check_params(action: Dict[str, Any], step: int) -> None:
    for key in NUMBER_PARAMS:
        if key in action and not _is_number(action[key]):
            raise ScriptError(
                f'{key} must be a number, got {action[key]!r}', step
            )
    for key in INTEGER_PARAMS:
        if key in action and not (
            isinstance(action[key], int) and not isinstance(action[key], bool)
        ):
            raise ScriptError(
                f'{key} must be an integer, got {action[key]!r}', step
            )
    for key in IDENTITY_PARAMS:
        if key in action:
            try:
                hash(action[key])
            except TypeError as e:
                raise ScriptError(
                    f'{key} must be a string or a number,'
                    f' got {action[key]!r}',
                    step
                ) from e


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _admin_caller(script_run: ScriptRun, action: Dict[str, Any]) -> Any:
    return action.get('caller', script_run.election.chairman)


def _set_period(script_run: ScriptRun, action: Dict[str, Any]) -> None:
    script_run.election.set_period(
        _admin_caller(script_run, action), action['duration']
    )


def _start(script_run: ScriptRun, action: Dict[str, Any]) -> None:
    script_run.election.start(_admin_caller(script_run, action))


def _grant(script_run: ScriptRun, action: Dict[str, Any]) -> None:
    script_run.election.grant_right(
        _admin_caller(script_run, action), action['identity']
    )


def _vote(script_run: ScriptRun, action: Dict[str, Any]) -> None:
    script_run.election.vote(action['caller'], action['index'])


def _advance(script_run: ScriptRun, action: Dict[str, Any]) -> None:
    script_run.clock.advance(action['seconds'])


def _end(script_run: ScriptRun, action: Dict[str, Any]) -> None:
    script_run.election.end(_admin_caller(script_run, action))


ACTIONS = {
    'set_period': _set_period,
    'start': _start,
    'grant': _grant,
    'vote': _vote,
    'advance': _advance,
    'end': _end,
}
