'''Election candidates.

Candidates are created by the ledger only (see
:meth:`voteledger.ledger.ElectionLedger.add_candidate`), which assigns them
sequential IDs starting from zero in the order they were added. The name and
ID of a candidate never change; the vote count is only ever incremented by the
ledger when a vote for the candidate is accepted.
'''

from voteledger.persist import simple_serialization


@simple_serialization
class Candidate:
    '''A named option that can accumulate votes.

    :param id: Sequential ID of the candidate within its ledger.
    :param name: Name of the candidate, in any customary text format.
    :param vote_count: Number of votes received so far.
    '''
    def __init__(self, id: int, name: str, vote_count: int = 0):
        if not isinstance(id, int) or isinstance(id, bool) or id < 0:
            raise ValueError(f'invalid candidate ID: {id!r}')
        if not isinstance(vote_count, int) or vote_count < 0:
            raise ValueError(f'invalid vote count: {vote_count!r}')
        self._id = id
        self._name = name
        self._vote_count = vote_count

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def vote_count(self) -> int:
        return self._vote_count

    def _add_vote(self) -> None:
        self._vote_count += 1

    def __repr__(self) -> str:
        return f'<Candidate({self._id},{self._name},{self._vote_count})>'
