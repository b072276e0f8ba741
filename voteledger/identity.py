'''Participant identities and the roles derived from them.

The ledger does not authenticate anybody; the hosting layer supplies the
identity of the caller of each operation. Any hashable object such as
a string or an integer can serve as an identity; :class:`Address` is provided
for hosts that want a distinct type that cannot be confused with other
strings.

Roles are never stored: :meth:`voteledger.ledger.ElectionLedger.get_role`
computes them from the ledger owner and the set of registered voters.
'''

import abc
import collections
import enum
from typing import Any

from voteledger.persist import simple_serialization


class IdentityError(TypeError):
    '''An object cannot be used as a participant identity.

    :param identity: The offending object.
    '''
    def __init__(self, identity: Any):
        self.identity = identity
        super().__init__(f'invalid identity: {identity!r}, must be hashable')


class Identity(metaclass=abc.ABCMeta):
    '''An abstract class for participant identities.

    The subclass check is overridden so that any hashable object that is not
    a set or tuple is accepted, so this is essentially just a type marker.
    '''
    @classmethod
    def __subclasshook__(cls, subcl):
        if cls is Identity:
            return (
                hasattr(subcl, '__hash__')
                and subcl.__hash__ is not None
                and not issubclass(subcl, collections.abc.Set)
                and not issubclass(subcl, tuple)
            )
        else:
            return super().__subclasshook__(subcl)


@simple_serialization
class Address(Identity):
    '''An opaque participant address.

    Two addresses are equal if their values are equal; an address never
    equals a bare string with the same value.

    :param value: The address value, in any customary text format.
    '''
    def __init__(self, value: str):
        if not isinstance(value, str) or not value:
            raise ValueError(f'invalid address value: {value!r}')
        self._value = value

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Address):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Address, self._value))

    def __repr__(self) -> str:
        return f'<Address({self._value})>'


class Role(enum.IntEnum):
    '''Role of an identity in the election.

    The integer values are the codes reported to external clients.
    '''
    OWNER = 1
    REGISTERED_VOTER = 2
    UNREGISTERED = 3


def validate_identity(identity: Any) -> None:
    '''Check that the object can be used as an identity.

    :param identity: Object to be checked.
    :raises IdentityError: If the object is not a valid identity.
    '''
    if identity is None or not isinstance(identity, Identity):
        raise IdentityError(identity)
