"""Voteledger - a single-authority election ledger.

A Voteledger election is run by one administrator, the owner, who defines
the candidates and the eligible voters and opens and closes the voting window.
Every registered voter can cast at most one vote for a registered candidate.

-   The state machine enforcing who may do what and when lives in the
    :mod:`ledger` module (:class:`ElectionLedger`).
-   The typed failures it raises are defined in the :mod:`errors` module,
    so that callers can tell why an operation was rejected, not just that it
    was.
-   Accepted votes are announced to subscribed listeners as
    :class:`event.Voted` notifications.
-   The :mod:`persist` module converts a ledger to a JSON-ready dictionary
    and back, for hosts that need to store it between calls.
"""

from voteledger.errors import (    # noqa: F401
    LedgerError, UnauthorizedError, InvalidPhaseError, DuplicateVoterError,
    AlreadyVotedError, InvalidCandidateError, LedgerIntegrityError
)
from voteledger.event import Voted    # noqa: F401
from voteledger.identity import Address, Role    # noqa: F401
from voteledger.ledger import ElectionLedger, ElectionPhase    # noqa: F401
