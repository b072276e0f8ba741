import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import voteledger.identity
from voteledger.identity import Address, Identity, Role


@pytest.mark.parametrize(('identity', 'is_valid'), [
    ('0xabc', True),
    (42, True),
    (Address('0xabc'), True),
    (('a', 'b'), False),
    (frozenset('ab'), False),
    (['a'], False),
    ({'a': 1}, False),
    (None, False),
])
def test_validate_identity(identity, is_valid):
    if is_valid:
        assert isinstance(identity, Identity)
        voteledger.identity.validate_identity(identity)
    else:
        with pytest.raises(voteledger.identity.IdentityError):
            voteledger.identity.validate_identity(identity)


def test_address_equality():
    assert Address('0xabc') == Address('0xabc')
    assert Address('0xabc') != Address('0xdef')
    assert Address('0xabc') != '0xabc'
    assert len({Address('0xabc'), Address('0xabc'), '0xabc'}) == 2


@pytest.mark.parametrize('value', ['', None, 12])
def test_invalid_address(value):
    with pytest.raises(ValueError):
        Address(value)


def test_address_to_dict():
    assert Address('0xabc').to_dict() == {
        'class': 'voteledger.identity.Address',
        'value': '0xabc',
    }


def test_role_codes():
    assert Role.OWNER == 1
    assert Role.REGISTERED_VOTER == 2
    assert Role.UNREGISTERED == 3
