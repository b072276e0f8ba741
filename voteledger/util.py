'''Various utility functions for other modules of Voteledger.

There should normally be no need to use these functions directly.
'''

import operator
from typing import Dict, List, Tuple


def sorted_tally(tally: Dict[int, int],
                 descending: bool = True,
                 ) -> List[Tuple[int, int]]:
    '''Return tally items sorted by vote count.

    Candidates with equal counts keep their order from the input tally (which
    is the ID order for tallies produced by the ledger).
    '''
    return list(sorted(
        tally.items(),
        key=operator.itemgetter(1),
        reverse=descending
    ))


def tally_leaders(tally: Dict[int, int]) -> List[int]:
    '''Return the IDs of all candidates that share the highest vote count.'''
    if not tally:
        return []
    best = max(tally.values())
    return [cand_id for cand_id, count in tally.items() if count == best]
