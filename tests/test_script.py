
import sys
import os
import io
import json

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import chairvote.script
import chairvote.__main__
from chairvote.errors import (
    AccessError, AlreadyVoted, ConfigurationError, StateError
)
from chairvote.events import ElectionEnded, TieDetected
from chairvote.period import Phase
from chairvote.script import ScriptError

EXAMPLE_SCRIPT = {
    'candidates': ['Alice', 'Bob', 'Carol'],
    'chairman': 'chair',
    'chairman_may_vote': True,
    'actions': [
        {'action': 'set_period', 'duration': 3600},
        {'action': 'start'},
        {'action': 'grant', 'identity': 'ann'},
        {'action': 'grant', 'identity': 'ben'},
        {'action': 'vote', 'caller': 'ann', 'index': 1},
        {'action': 'vote', 'caller': 'ben', 'index': 1},
        {'action': 'vote', 'caller': 'chair', 'index': 0},
        {'action': 'vote', 'caller': 'ben', 'index': 2},
        {'action': 'end', 'caller': 'ann'},
        {'action': 'advance', 'seconds': 3601},
        {'action': 'vote', 'caller': 'cid', 'index': 0},
        {'action': 'end'},
    ],
}


def test_run_example():
    script_run = chairvote.script.run(chairvote.script.parse(EXAMPLE_SCRIPT))
    election = script_run.election
    assert [c.vote_count for c in election.results()] == [1, 2, 0]
    assert election.phase == Phase.ENDED
    assert script_run.clock() == 3601
    assert [(i, type(e)) for i, e in script_run.rejected] == [
        (7, AlreadyVoted),
        (8, AccessError),
        (10, StateError),
    ]
    ended = election.history()[-1]
    assert isinstance(ended, ElectionEnded)
    assert (ended.winner_index, ended.name, ended.count) == (1, 'Bob', 2)


def test_run_two_rounds():
    script = chairvote.script.loads(json.dumps({
        'candidates': ['A', 'B'],
        'chairman': 'chair',
        'auto_start': True,
        'actions': [
            {'action': 'grant', 'identity': 'ann'},
            {'action': 'grant', 'identity': 'ben'},
            {'action': 'set_period', 'duration': 10},
            {'action': 'vote', 'caller': 'ann', 'index': 0},
            {'action': 'vote', 'caller': 'ben', 'index': 1},
            {'action': 'advance', 'seconds': 10},
            {'action': 'end'},
            {'action': 'set_period', 'duration': 10},
            {'action': 'vote', 'caller': 'ann', 'index': 1},
        ],
    }))
    script_run = chairvote.script.run(script, start_time=50)
    election = script_run.election
    assert script_run.rejected == []
    assert isinstance(election.history()[-3], TieDetected)
    assert election.round_number == 2
    assert [c.vote_count for c in election.results()] == [0, 1]


@pytest.mark.parametrize('data', [
    [],
    {'chairman': 'chair'},
    {'candidates': ['A', 'B']},
    {'candidates': ['A', 'B'], 'chairman': 'c', 'extra': 1},
    {'candidates': ['A', 'B'], 'chairman': 'c', 'actions': {}},
    {'candidates': ['A', 'B'], 'chairman': 'c', 'actions': [{'x': 1}]},
    {'candidates': ['A', 'B'], 'chairman': 'c',
     'actions': [{'action': 'revoke'}]},
    {'candidates': ['A', 'B'], 'chairman': 'c',
     'actions': [{'action': 'set_period', 'duration': 'long'}]},
    {'candidates': ['A', 'B'], 'chairman': 'c',
     'actions': [{'action': 'advance', 'seconds': True}]},
    {'candidates': ['A', 'B'], 'chairman': 'c',
     'actions': [{'action': 'vote', 'caller': ['x'], 'index': 0}]},
    {'candidates': ['A', 'B'], 'chairman': 'c',
     'actions': [{'action': 'vote', 'caller': 'x', 'index': '0'}]},
    {'candidates': ['A', 'B'], 'chairman': 'c',
     'actions': [{'action': 'grant', 'identity': {'name': 'x'}}]},
])
def test_parse_invalid(data):
    with pytest.raises(ScriptError):
        chairvote.script.parse(data)


def test_loads_invalid_json():
    with pytest.raises(ScriptError):
        chairvote.script.loads('{"candidates": ')


def test_missing_parameter():
    script = chairvote.script.parse({
        'candidates': ['A', 'B'],
        'chairman': 'c',
        'actions': [{'action': 'set_period'}],
    })
    with pytest.raises(ScriptError) as excinfo:
        chairvote.script.run(script)
    assert excinfo.value.step == 0


def test_negative_advance():
    script = chairvote.script.parse({
        'candidates': ['A', 'B'],
        'chairman': 'c',
        'actions': [{'action': 'advance', 'seconds': -1}],
    })
    with pytest.raises(ScriptError):
        chairvote.script.run(script)


def test_invalid_setup():
    script = chairvote.script.parse({'candidates': ['A'], 'chairman': 'c'})
    with pytest.raises(ConfigurationError):
        chairvote.script.run(script)


def test_main_summary(capsys):
    chairvote.__main__.main(io.StringIO(json.dumps(EXAMPLE_SCRIPT)))
    out = capsys.readouterr().out
    assert 'Ran 12 actions, 3 rejected' in out
    assert 'ElectionEnded winner_index=1 name=Bob count=2' in out
    assert 'Bob' in out.split('Tally')[1]


def test_main_json(capsys):
    chairvote.__main__.main(
        io.StringIO(json.dumps(EXAMPLE_SCRIPT)), as_json=True
    )
    state = json.loads(capsys.readouterr().out)
    assert state['phase'] == 'ENDED'
    assert [c['vote_count'] for c in state['candidates']] == [1, 2, 0]
    assert state['voters']['ann'] == {
        'class': 'VoterRecord', 'can_vote': True, 'has_voted': True,
        'chosen_index': 1,
    }


@pytest.mark.parametrize('action', [
    {'action': 'advance', 'seconds': None},
    {'action': 'vote', 'caller': ['x'], 'index': 0},
    {'action': 'advance', 'seconds': 'x'},
])
def test_wrong_parameter_type_at_run(action):
    script = chairvote.script.ElectionScript(
        candidates=['A', 'B'],
        chairman='c',
        auto_start=True,
        actions=[{'action': 'set_period', 'duration': 10}, action],
    )
    with pytest.raises(ScriptError) as excinfo:
        chairvote.script.run(script)
    assert excinfo.value.step == 1
