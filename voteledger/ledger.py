'''The election ledger state machine.

An :class:`ElectionLedger` is created by its owner, the single identity
allowed to configure and drive the election. The election then passes
through three phases, each exactly once and always in this order:

-   :attr:`ElectionPhase.NOT_STARTED` - the owner adds candidates
    (:meth:`ElectionLedger.add_candidate`) and registers voters
    (:meth:`ElectionLedger.add_voter`),
-   :attr:`ElectionPhase.IN_PROGRESS` - entered by
    :meth:`ElectionLedger.start_election`; every registered voter may cast
    exactly one vote (:meth:`ElectionLedger.vote`),
-   :attr:`ElectionPhase.ENDED` - entered by
    :meth:`ElectionLedger.end_election`; terminal, only queries are possible.

Every operation takes the identity of its caller as its first argument;
authenticating the caller is the job of the hosting layer. All preconditions
are checked before any state is modified, so a rejected operation (signalled
by a :class:`voteledger.errors.LedgerError` subclass) leaves the ledger
unchanged.
'''

import enum
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import voteledger.util
from voteledger import persist
from voteledger.candidate import Candidate
from voteledger.errors import (
    LedgerError, UnauthorizedError, InvalidPhaseError, AlreadyVotedError,
    InvalidCandidateError, LedgerIntegrityError
)
from voteledger.event import EventChannel, Listener, Voted
from voteledger.identity import Role, validate_identity
from voteledger.voter import VoterRegistry

logger = logging.getLogger(__name__)


class ElectionPhase(enum.IntEnum):
    '''Lifecycle stage of the election.

    The integer values are the codes reported to external clients.
    '''
    NOT_STARTED = 0
    IN_PROGRESS = 1
    ENDED = 2


class ElectionLedger:
    '''A single-authority election with exactly-once voting.

    :param owner: Identity of the creator of the ledger; the only one allowed
        to add candidates and voters and to start and end the election.
        Cannot be changed later.
    :param name: Human-readable name of the election, if any.
    :param listeners: Callables to be notified with a
        :class:`voteledger.event.Voted` event on every accepted vote. More can
        be added later by :meth:`subscribe`.
    :raises voteledger.identity.IdentityError: If the owner is not a valid
        identity.
    '''
    def __init__(self,
                 owner: Any,
                 name: Optional[str] = None,
                 listeners: Iterable[Listener] = (),
                 ):
        validate_identity(owner)
        if name is not None and not isinstance(name, str):
            raise TypeError(f'election name must be a string, got {name!r}')
        self._owner = owner
        self._name = name
        self._phase = ElectionPhase.NOT_STARTED
        self._candidates: List[Candidate] = []
        self._voters = VoterRegistry()
        self._events = EventChannel(listeners)
        logger.info('election %s created by %r', self._label(), owner)

    @property
    def owner(self) -> Any:
        return self._owner

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def phase(self) -> ElectionPhase:
        return self._phase

    @property
    def n_candidates(self) -> int:
        return len(self._candidates)

    # Owner operations
    def add_candidate(self, caller: Any, name: str) -> Candidate:
        '''Register a new candidate under the next sequential ID.

        :param caller: Identity of the caller; must be the owner.
        :param name: Name of the candidate.
        :returns: The created candidate.
        :raises InvalidPhaseError: If the election has already started.
        :raises UnauthorizedError: If the caller is not the owner.
        :raises TypeError: If the name is not a string.
        '''
        self._require_phase('add candidates', ElectionPhase.NOT_STARTED)
        self._require_owner(caller, 'add candidates')
        if not isinstance(name, str):
            raise TypeError(f'candidate name must be a string, got {name!r}')
        candidate = Candidate(len(self._candidates), name)
        self._candidates.append(candidate)
        logger.info('candidate %d added: %s', candidate.id, name)
        return candidate

    def add_voter(self, caller: Any, voter: Any) -> None:
        '''Register a voter eligible to cast one vote.

        :param caller: Identity of the caller; must be the owner.
        :param voter: Identity of the voter.
        :raises InvalidPhaseError: If the election has already started.
        :raises UnauthorizedError: If the caller is not the owner.
        :raises DuplicateVoterError: If the voter is already registered.
        '''
        self._require_phase('add voters', ElectionPhase.NOT_STARTED)
        self._require_owner(caller, 'add voters')
        validate_identity(voter)
        try:
            self._voters.register(voter)
        except LedgerError as err:
            logger.debug('rejected voter registration: %s', err)
            raise
        logger.info('voter registered: %r', voter)

    def start_election(self, caller: Any) -> None:
        '''Open voting.

        :raises InvalidPhaseError: If the election has already started.
        :raises UnauthorizedError: If the caller is not the owner.
        '''
        self._require_phase('start the election', ElectionPhase.NOT_STARTED)
        self._require_owner(caller, 'start the election')
        self._phase = ElectionPhase.IN_PROGRESS
        logger.info(
            'election %s started with %d candidates and %d voters',
            self._label(), len(self._candidates), len(self._voters)
        )

    def end_election(self, caller: Any) -> None:
        '''Close voting for good.

        :raises InvalidPhaseError: If the election is not in progress
            (including when it was never started).
        :raises UnauthorizedError: If the caller is not the owner.
        '''
        self._require_phase('end the election', ElectionPhase.IN_PROGRESS)
        self._require_owner(caller, 'end the election')
        self._phase = ElectionPhase.ENDED
        logger.info(
            'election %s ended, %d of %d voters voted',
            self._label(), self._voters.n_voted, len(self._voters)
        )

    # Voter operations
    def vote(self, caller: Any, candidate_id: int) -> Voted:
        '''Cast the caller's single vote for a candidate.

        The preconditions are checked in this order: the election must be in
        progress, the caller must be a registered voter that has not voted
        yet and the candidate ID must exist.

        :param caller: Identity of the voter.
        :param candidate_id: ID of the chosen candidate.
        :returns: The event that was published to the listeners. Listener
            failures are logged and do not affect the result.
        :raises InvalidPhaseError: If the election is not in progress.
        :raises UnauthorizedError: If the caller is not a registered voter.
        :raises AlreadyVotedError: If the caller has already voted.
        :raises InvalidCandidateError: If there is no such candidate.
        '''
        self._require_phase('vote', ElectionPhase.IN_PROGRESS)
        if not self.is_registered(caller):
            self._reject(UnauthorizedError(caller, 'vote', 'a registered voter'))
        if self._voters.has_voted(caller):
            self._reject(AlreadyVotedError(caller))
        candidate = self._lookup_candidate(candidate_id)
        self._voters.record_vote(caller, candidate.id)
        candidate._add_vote()
        logger.info('vote accepted for candidate %d', candidate.id)
        event = Voted(candidate_id=candidate.id, voter=caller)
        self._events.publish(event)
        return event

    # Queries
    def get_role(self, identity: Any) -> Role:
        '''Return the role of the identity in this election.

        Objects that cannot be identities are reported as unregistered.
        '''
        if identity == self._owner:
            return Role.OWNER
        elif self.is_registered(identity):
            return Role.REGISTERED_VOTER
        else:
            return Role.UNREGISTERED

    def get_phase(self) -> ElectionPhase:
        return self._phase

    def get_candidates(self) -> List[Candidate]:
        '''Return all candidates in ID order.'''
        return list(self._candidates)

    def get_candidate(self, candidate_id: int) -> Candidate:
        '''Return the candidate with the given ID.

        :raises InvalidCandidateError: If there is no such candidate.
        '''
        return self._lookup_candidate(candidate_id)

    def get_voters(self) -> List[Any]:
        '''Return the registered voters in registration order.'''
        return self._voters.voters()

    def is_registered(self, identity: Any) -> bool:
        try:
            return identity in self._voters
        except TypeError:    # unhashable, cannot be registered
            return False

    def has_voted(self, identity: Any) -> bool:
        '''Return whether the identity cast a vote. False if unregistered.'''
        return self.is_registered(identity) and self._voters.has_voted(identity)

    def tally(self) -> Dict[int, int]:
        '''Return the vote counts keyed by candidate ID, in ID order.'''
        return {cand.id: cand.vote_count for cand in self._candidates}

    def standings(self) -> List[Tuple[int, int]]:
        '''Return (candidate ID, vote count) pairs, most votes first.

        Candidates with equal counts are listed in ID order.
        '''
        return voteledger.util.sorted_tally(self.tally())

    def leaders(self) -> List[int]:
        '''Return the IDs of the candidates with the most votes so far.

        All tied candidates are returned; no tie-breaking is performed.
        '''
        return voteledger.util.tally_leaders(self.tally())

    # Notifications
    def subscribe(self, listener: Listener) -> None:
        '''Call the listener with a Voted event on every accepted vote.'''
        self._events.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._events.unsubscribe(listener)

    def check_integrity(self) -> None:
        '''Verify that the tally agrees with the recorded votes.

        :raises LedgerIntegrityError: If a candidate's vote count differs from
            the number of voters recorded as voting for it, or a recorded vote
            refers to a missing candidate.
        '''
        recounted = {cand.id: 0 for cand in self._candidates}
        for voter, choice in self._voters.records():
            if choice is None:
                continue
            if choice not in recounted:
                raise LedgerIntegrityError(
                    f'{voter!r} voted for unknown candidate {choice}'
                )
            recounted[choice] += 1
        for cand in self._candidates:
            if cand.vote_count != recounted[cand.id]:
                raise LedgerIntegrityError(
                    f'candidate {cand.id} has {cand.vote_count} votes,'
                    f' {recounted[cand.id]} recorded'
                )
        if self._phase == ElectionPhase.NOT_STARTED and self._voters.n_voted:
            raise LedgerIntegrityError('votes recorded before the start')

    # Serialization
    def to_dict(self) -> Dict[str, Any]:
        return {
            'class': persist.scoped_class_name(self),
            'owner': persist.serialize_value(self._owner),
            'name': self._name,
            'phase': int(self._phase),
            'candidates': [cand.to_dict() for cand in self._candidates],
            'voters': [
                {'voter': persist.serialize_value(voter), 'choice': choice}
                for voter, choice in self._voters.records()
            ],
        }

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> 'ElectionLedger':
        '''Restore a ledger from the output of :meth:`to_dict`.

        Listeners are not part of the snapshot and no events are published
        during the restore.

        :raises ValueError: If the definition is malformed or inconsistent.
        '''
        missing = {'owner', 'phase', 'candidates', 'voters'} - set(params)
        if missing:
            raise ValueError(f'invalid ledger def: missing {sorted(missing)}')
        try:
            ledger = cls(
                persist.deserialize_value(params['owner']),
                name=params.get('name'),
            )
        except TypeError as err:
            raise ValueError(f'invalid ledger def: {err}')
        try:
            ledger._phase = ElectionPhase(params['phase'])
        except ValueError:
            raise ValueError(f"invalid ledger phase: {params['phase']!r}")
        for key in ('candidates', 'voters'):
            if not isinstance(params[key], list):
                raise ValueError(f'invalid ledger def: {key} must be a list')
        for i, cand_def in enumerate(params['candidates']):
            candidate = persist.deserialize_value(cand_def)
            if not isinstance(candidate, Candidate) or candidate.id != i:
                raise ValueError(f'invalid candidate def at {i}: {cand_def!r}')
            ledger._candidates.append(candidate)
        for voter_def in params['voters']:
            if not isinstance(voter_def, dict) or 'voter' not in voter_def:
                raise ValueError(f'invalid voter def: {voter_def!r}')
            voter = persist.deserialize_value(voter_def['voter'])
            choice = voter_def.get('choice')
            if choice is not None and (
                not isinstance(choice, int) or isinstance(choice, bool)
            ):
                raise ValueError(f'invalid vote choice: {choice!r}')
            try:
                validate_identity(voter)
                ledger._voters.register(voter)
            except (TypeError, LedgerError) as err:
                raise ValueError(f'invalid ledger def: {err}')
            if choice is not None:
                ledger._voters.record_vote(voter, choice)
        try:
            ledger.check_integrity()
        except LedgerIntegrityError as err:
            raise ValueError(f'inconsistent ledger def: {err}')
        return ledger

    def _require_phase(self, action: str, phase: ElectionPhase) -> None:
        if self._phase != phase:
            self._reject(InvalidPhaseError(self._phase, action, [phase]))

    def _require_owner(self, caller: Any, action: str) -> None:
        if caller != self._owner:
            self._reject(UnauthorizedError(caller, action, 'the owner'))

    def _lookup_candidate(self, candidate_id: Any) -> Candidate:
        if (
            not isinstance(candidate_id, int)
            or isinstance(candidate_id, bool)
            or not 0 <= candidate_id < len(self._candidates)
        ):
            self._reject(
                InvalidCandidateError(candidate_id, len(self._candidates))
            )
        return self._candidates[candidate_id]

    def _reject(self, error: LedgerError) -> None:
        logger.debug('rejected: %s', error)
        raise error

    def _label(self) -> str:
        return repr(self._name) if self._name is not None else 'unnamed'

    def __repr__(self) -> str:
        return (
            f'<ElectionLedger({self._label()},{self._phase.name},'
            f'{len(self._candidates)} candidates,{len(self._voters)} voters)>'
        )
