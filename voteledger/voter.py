'''Registered voters and their voting records.'''

import collections
from typing import Any, Dict, Iterator, List, Optional, Tuple

from voteledger.errors import AlreadyVotedError, DuplicateVoterError


class VoterRegistry:
    '''The set of registered voters with a record of their votes.

    Keeps the voters in registration order. For every voter, the ID of the
    candidate they voted for is recorded (None until they vote), so a voter
    has voted if and only if there is a recorded choice for them.

    The registry does not check election phases or caller roles; that is the
    job of the ledger.
    '''
    def __init__(self):
        self._choices: Dict[Any, Optional[int]] = collections.OrderedDict()

    def register(self, voter: Any) -> None:
        '''Add a voter that has not voted yet.

        :raises DuplicateVoterError: If the voter is already registered.
        '''
        if voter in self._choices:
            raise DuplicateVoterError(voter)
        self._choices[voter] = None

    def record_vote(self, voter: Any, candidate_id: int) -> None:
        '''Record that a registered voter voted for a candidate.

        :raises KeyError: If the voter is not registered.
        :raises AlreadyVotedError: If the voter has already voted.
        '''
        if self._choices[voter] is not None:
            raise AlreadyVotedError(voter)
        self._choices[voter] = candidate_id

    def has_voted(self, voter: Any) -> bool:
        '''Return whether the voter voted. False for unregistered voters.'''
        return self._choices.get(voter) is not None

    def choice(self, voter: Any) -> Optional[int]:
        '''Return the candidate ID the voter voted for, or None.'''
        return self._choices.get(voter)

    @property
    def n_voted(self) -> int:
        return sum(1 for choice in self._choices.values() if choice is not None)

    def voters(self) -> List[Any]:
        return list(self._choices.keys())

    def records(self) -> List[Tuple[Any, Optional[int]]]:
        '''Return (voter, chosen candidate ID or None) pairs.'''
        return list(self._choices.items())

    def __contains__(self, voter: Any) -> bool:
        return voter in self._choices

    def __iter__(self) -> Iterator[Any]:
        return iter(self._choices)

    def __len__(self) -> int:
        return len(self._choices)
