
import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import chairvote.candidate
import chairvote.config
from chairvote.errors import ConfigurationError


@pytest.mark.parametrize(('name', 'is_valid'), [
    ('Alice', True),
    ('', True),
    ('x' * 32, True),
    ('x' * 33, False),
    ('Žofie Nováková Dvořáková', True),
    ('Žž' * 8, True),
    ('Žž' * 9, False),
    (None, False),
    (42, False),
])
def test_validate_name(name, is_valid):
    if is_valid:
        assert chairvote.candidate.validate_name(name) == name
    else:
        with pytest.raises(ConfigurationError):
            chairvote.candidate.validate_name(name)


def test_candidate_name_immutable():
    cand = chairvote.candidate.Candidate('Alice')
    assert cand.vote_count == 0
    with pytest.raises(AttributeError):
        cand.name = 'Bob'


def test_candidate_copy_detached():
    cand = chairvote.candidate.Candidate('Alice', 3)
    copied = cand.copy()
    copied.vote_count += 1
    assert cand.vote_count == 3
    assert copied == chairvote.candidate.Candidate('Alice', 4)


def test_candidate_to_dict():
    assert chairvote.candidate.Candidate('Bob', 2).to_dict() == {
        'class': 'Candidate', 'name': 'Bob', 'vote_count': 2
    }


@pytest.mark.parametrize('names', [
    [],
    ['Alone'],
    'AB',
    ['Alice', 'x' * 40],
    ['Alice', None],
])
def test_config_invalid(names):
    with pytest.raises(ConfigurationError):
        chairvote.config.ElectionConfig(names, 'chair')


def test_config_unhashable_chairman():
    with pytest.raises(ConfigurationError):
        chairvote.config.ElectionConfig(['A', 'B'], ['chair'])


def test_config_fixed():
    names = ['Alice', 'Bob']
    config = chairvote.config.ElectionConfig(
        names, 'chair', chairman_may_vote=True
    )
    names.append('Carol')
    assert config.names == ('Alice', 'Bob')
    assert config.n_candidates == 2
    assert config.chairman == 'chair'
    assert config.chairman_may_vote
    assert not config.auto_start
    assert config.allow_new_rounds
    assert config.is_chairman('chair')
    assert not config.is_chairman('alice')
    with pytest.raises(AttributeError):
        config.chairman = 'alice'


def test_config_to_dict():
    config = chairvote.config.ElectionConfig(['A', 'B'], 'chair')
    assert config.to_dict() == {
        'class': 'ElectionConfig',
        'names': ['A', 'B'],
        'chairman': 'chair',
        'chairman_may_vote': False,
        'auto_start': False,
        'allow_new_rounds': True,
    }
