import sys
import os
import json

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import voteledger.persist
from voteledger.errors import AlreadyVotedError, InvalidPhaseError
from voteledger.identity import Address
from voteledger.ledger import ElectionLedger, ElectionPhase

OWNER = Address('0xowner')
VOTERS = [Address(f'0xvoter{i}') for i in range(3)]


def sample_ledger():
    ledger = ElectionLedger(OWNER, name='Tramtarie')
    ledger.add_candidate(OWNER, 'Candidate 1')
    ledger.add_candidate(OWNER, 'Candidate 2')
    for voter in VOTERS:
        ledger.add_voter(OWNER, voter)
    ledger.start_election(OWNER)
    ledger.vote(VOTERS[0], 1)
    ledger.vote(VOTERS[2], 1)
    return ledger


def roundtrip(ledger):
    serial = json.dumps(voteledger.persist.to_dict(ledger))
    return voteledger.persist.from_dict(json.loads(serial))


def test_roundtrip_state():
    ledger = sample_ledger()
    restored = roundtrip(ledger)
    assert isinstance(restored, ElectionLedger)
    assert restored.owner == OWNER
    assert restored.name == 'Tramtarie'
    assert restored.phase == ElectionPhase.IN_PROGRESS
    assert restored.tally() == {0: 0, 1: 2}
    assert restored.get_voters() == VOTERS
    assert [restored.has_voted(v) for v in VOTERS] == [True, False, True]
    assert voteledger.persist.to_dict(restored) == voteledger.persist.to_dict(ledger)


def test_restored_rules_apply():
    restored = roundtrip(sample_ledger())
    with pytest.raises(AlreadyVotedError):
        restored.vote(VOTERS[0], 0)
    with pytest.raises(InvalidPhaseError):
        restored.add_candidate(OWNER, 'Candidate 3')
    restored.vote(VOTERS[1], 0)
    assert restored.tally() == {0: 1, 1: 2}


def test_string_identities():
    ledger = ElectionLedger('owner')
    ledger.add_voter('owner', 'voter')
    restored = roundtrip(ledger)
    assert restored.owner == 'owner'
    assert restored.get_voters() == ['voter']
    assert restored.phase == ElectionPhase.NOT_STARTED


def test_listeners_not_persisted():
    events = []
    ledger = ElectionLedger(OWNER, listeners=[events.append])
    ledger.add_candidate(OWNER, 'Candidate 1')
    ledger.add_voter(OWNER, VOTERS[0])
    ledger.start_election(OWNER)
    restored = roundtrip(ledger)
    restored.vote(VOTERS[0], 0)
    assert events == []


def test_inconsistent_tally():
    ledger_dict = voteledger.persist.to_dict(sample_ledger())
    ledger_dict['candidates'][0]['vote_count'] = 5
    with pytest.raises(ValueError):
        voteledger.persist.from_dict(ledger_dict)


@pytest.mark.parametrize('value', [
    'ElectionLedger',
    ['voteledger.ledger.ElectionLedger'],
    {'owner': 'owner'},
    {'class': '.ledger.ElectionLedger'},
    {'class': 'os.system', 'command': 'ls'},
    {'class': 'voteledger.ledger.NoSuchClass'},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner'},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 7, 'candidates': [], 'voters': []},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 0, 'candidates': [], 'voters': ['voter']},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 0, 'candidates': [], 'voters': [
         {'voter': 'a', 'choice': None}, {'voter': 'a', 'choice': None},
     ]},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 1, 'candidates': [], 'voters': [{'voter': 'a', 'choice': 0}]},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 0, 'candidates': [
         {'class': 'voteledger.candidate.Candidate', 'id': 1, 'name': 'X',
          'vote_count': 0},
     ], 'voters': []},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': ['a'],
     'phase': 0, 'candidates': [], 'voters': []},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': None,
     'phase': 0, 'candidates': [], 'voters': []},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 0, 'candidates': [], 'voters': [{'voter': None}]},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 0, 'candidates': [], 'voters': 5},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 0, 'candidates': 'AB', 'voters': []},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 1, 'candidates': [
         {'class': 'voteledger.candidate.Candidate', 'id': 0, 'name': 'X',
          'vote_count': 0},
         {'class': 'voteledger.candidate.Candidate', 'id': 1, 'name': 'Y',
          'vote_count': 1},
     ], 'voters': [{'voter': 'v', 'choice': True}]},
    {'class': 'voteledger.ledger.ElectionLedger', 'owner': 'owner',
     'phase': 1, 'candidates': [
         {'class': 'voteledger.candidate.Candidate', 'id': 0, 'name': 'X',
          'vote_count': 1},
     ], 'voters': [{'voter': 'v', 'choice': 0.0}]},
])
def test_invalid_def(value):
    with pytest.raises(ValueError):
        voteledger.persist.from_dict(value)


def test_unserializable_identity():
    ledger = ElectionLedger(object())
    with pytest.raises(ValueError):
        voteledger.persist.to_dict(ledger)
