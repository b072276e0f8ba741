'''Typed failures raised by the election ledger.

Every operation of :class:`voteledger.ledger.ElectionLedger` checks all of
its preconditions before touching any state and raises a subclass of
:class:`LedgerError` if one of them does not hold. The subclass (and its
:attr:`LedgerError.kind` string, for hosts that cannot branch on Python
classes) tells the caller why the operation was rejected:

-   :class:`UnauthorizedError` - the caller lacks the required role,
-   :class:`InvalidPhaseError` - the election is not in the phase the action
    requires,
-   :class:`DuplicateVoterError` - the voter is already registered,
-   :class:`AlreadyVotedError` - the voter has already cast a vote,
-   :class:`InvalidCandidateError` - the candidate ID does not exist.
'''

import abc
from typing import Any, Optional, Collection


class LedgerError(Exception, metaclass=abc.ABCMeta):
    '''An operation was rejected by the election rules.'''
    kind: str = NotImplemented


class UnauthorizedError(LedgerError):
    '''The caller is not allowed to perform the action.

    :param caller: Identity that attempted the action.
    :param action: Name of the attempted action.
    :param required: Description of the role that is required.
    '''
    kind = 'Unauthorized'

    def __init__(self,
                 caller: Any,
                 action: str,
                 required: Optional[str] = None,
                 ):
        self.caller = caller
        self.action = action
        self.required = required
        message = f'{caller!r} not authorized to {action}'
        if required:
            message += f', must be {required}'
        super().__init__(message)


class InvalidPhaseError(LedgerError):
    '''The action is not permitted in the current election phase.

    :param phase: Phase the election was in.
    :param action: Name of the attempted action.
    :param expected: Phases in which the action would be permitted.
    '''
    kind = 'InvalidPhase'

    def __init__(self,
                 phase: Any,
                 action: str,
                 expected: Collection[Any] = (),
                 ):
        self.phase = phase
        self.action = action
        self.expected = expected
        message = f'cannot {action} in phase {_phase_name(phase)}'
        if expected:
            allowed = ', '.join(_phase_name(exp) for exp in expected)
            message += f', allowed in {allowed}'
        super().__init__(message)


class DuplicateVoterError(LedgerError):
    '''The voter is already registered.

    :param voter: Identity that was registered for the second time.
    '''
    kind = 'DuplicateVoter'

    def __init__(self, voter: Any):
        self.voter = voter
        super().__init__(f'voter already registered: {voter!r}')


class AlreadyVotedError(LedgerError):
    '''A registered voter attempted to vote for the second time.

    :param voter: Identity of the voter.
    '''
    kind = 'AlreadyVoted'

    def __init__(self, voter: Any):
        self.voter = voter
        super().__init__(f'voter already voted: {voter!r}')


class InvalidCandidateError(LedgerError):
    '''A candidate ID does not denote a registered candidate.

    :param candidate_id: The ID that was given.
    :param n_candidates: Number of registered candidates (valid IDs run from
        zero to one less than this).
    '''
    kind = 'InvalidCandidate'

    def __init__(self, candidate_id: Any, n_candidates: int):
        self.candidate_id = candidate_id
        self.n_candidates = n_candidates
        message = f'invalid candidate ID: {candidate_id!r}'
        if n_candidates:
            message += f', must be 0 to {n_candidates - 1}'
        else:
            message += ', no candidates registered'
        super().__init__(message)


class LedgerIntegrityError(LedgerError):
    '''The ledger bookkeeping is inconsistent.

    Never raised by the ledger operations themselves, only by the explicit
    integrity check; indicates a ledger restored from corrupted data.

    :param problem: Description of the inconsistency.
    '''
    kind = 'Integrity'

    def __init__(self, problem: str):
        self.problem = problem
        super().__init__(f'ledger integrity violated: {problem}')


def _phase_name(phase: Any) -> str:
    return getattr(phase, 'name', str(phase))
