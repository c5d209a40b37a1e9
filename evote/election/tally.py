"""
Tally & Winner Selection

Finds the proposals tied at the highest vote count and picks one of them.
"""

from typing import List, Sequence, Tuple

from ..exceptions import NoVotesCastError
from .randomness import RandomnessSource


def compute_tied_winners(vote_counts: Sequence[int]) -> Tuple[int, List[int]]:
    """
    Scan vote counts in index order.

    A strictly higher count restarts the tied list with its index; an equal
    count joins it. An all-zero tally ties every index at 0.

    Returns:
        (max_count, tied_ids) with tied_ids in ascending index order.
        No proposals gives (0, []).
    """
    max_count = 0
    tied: List[int] = []
    for index, count in enumerate(vote_counts):
        if not tied or count > max_count:
            max_count = count
            tied = [index]
        elif count == max_count:
            tied.append(index)
    return max_count, tied


def choose_winner(tied_ids: Sequence[int], randomness: RandomnessSource) -> int:
    """
    Pick the winning index among tied proposals.

    A single tied index wins outright and the randomness source is not
    consulted.
    """
    if not tied_ids:
        raise NoVotesCastError("No proposal to choose a winner from")
    if len(tied_ids) == 1:
        return tied_ids[0]
    position = randomness.draw() % len(tied_ids)
    return tied_ids[position]
