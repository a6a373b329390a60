# Area: Core
"""
rankify_sdk.reconstruction — Historic turn reconstruction
=========================================================

Turns the permuted proposals and vote matrix published at the end of a
turn back into a per-player view.

Steps
-----
1. Truncate the payloads to ``len(permutation)``; the permutation is the
   single source of truth for the player count.
2. Reverse-permute proposals, vote rows and vote columns.
3. ``max_votes = isqrt(vote_credits)``, the most one voter can give one
   proposal under quadratic budgeting.
4. Score every proposer from every other voter. A voter whose whole row
   is zero is idle and counts as giving ``max_votes`` to everyone.
"""

from __future__ import annotations
import logging
import math
from typing import List, Optional, Sequence

from .errors import MalformedInputError
from .permutations import reverse_permutation, truncate, validate_permutation
from .types import PlayerRef, PlayerTurnResult, ScoreContribution

logger = logging.getLogger("rankify_sdk")


def max_votes(vote_credits: int) -> int:
    """Largest vote a single voter can give a single proposal."""
    if isinstance(vote_credits, bool) or not isinstance(vote_credits, int) or vote_credits < 0:
        raise MalformedInputError("vote_credits", "expected a non-negative integer", vote_credits)
    return math.isqrt(vote_credits)


def _vote_matrix(votes: Sequence[Sequence[int]], size: int) -> List[List[int]]:
    """Truncate the matrix to ``size`` x ``size`` and check every cell."""
    rows = truncate(votes, size)
    matrix: List[List[int]] = []
    for r, row in enumerate(rows):
        cells = truncate(row, size)
        for c, cell in enumerate(cells):
            if isinstance(cell, bool) or not isinstance(cell, int) or cell < 0:
                raise MalformedInputError(
                    "votes",
                    f"cell [{r}][{c}] is not a non-negative integer",
                    cell,
                )
        matrix.append(cells)
    return matrix


def reverse_vote_matrix(votes: Sequence[Sequence[int]], permutation: Sequence[int]) -> List[List[int]]:
    """Reverse-permute both voter rows and proposer columns."""
    rows = reverse_permutation(votes, permutation)
    return [reverse_permutation(row, permutation) for row in rows]


def reconstruct_turn(
    proposals: Sequence[str],
    votes: Sequence[Sequence[int]],
    permutation: Sequence[int],
    vote_credits: int,
    players: Optional[Sequence[str]] = None,
    block_timestamp: Optional[int] = None,
) -> List[PlayerTurnResult]:
    """
    Reconstruct the player-indexed results of one turn.

    Parameters
    ----------
    proposals : list of str
        Permuted proposals, one slot per player, "" for no submission.
        May be longer than the permutation.
    votes : list of list of int
        Permuted vote matrix: rows are voter slots, columns proposer slots.
    permutation : list of int
        Maps true player index to permuted slot.
    vote_credits : int
        Per-player vote credit budget of the game.
    players : list of str, optional
        Player addresses in true order. When omitted, results refer to
        players by their true index.
    block_timestamp : int, optional
        Copied onto every result.

    Returns
    -------
    list of PlayerTurnResult
        One entry per player, in true player order.

    Raises
    ------
    MalformedInputError
        If payloads are shorter than the permutation, the permutation is
        not a bijection, or ``players`` has the wrong length.
    """
    indices = validate_permutation(permutation)
    size = len(indices)

    if players is not None and len(players) != size:
        raise MalformedInputError(
            "players",
            f"length {len(players)} does not match permutation length {size}",
        )

    true_proposals = reverse_permutation(truncate(proposals, size), indices)
    matrix = reverse_vote_matrix(_vote_matrix(votes, size), indices)
    ceiling = max_votes(vote_credits)

    idle = [sum(row) == 0 for row in matrix]
    if any(idle):
        logger.debug(
            f"Idle voters {[v for v, is_idle in enumerate(idle) if is_idle]} "
            f"counted at {ceiling} votes"
        )

    def ref(index: int) -> PlayerRef:
        return players[index] if players is not None else index

    results: List[PlayerTurnResult] = []
    for proposer in range(size):
        proposal = true_proposals[proposer] or ""
        score = 0
        score_list: List[ScoreContribution] = []

        if proposal:
            for voter in range(size):
                if voter == proposer:
                    continue
                contribution = ceiling if idle[voter] else matrix[voter][proposer]
                score += contribution
                if contribution > 0:
                    score_list.append({"voter": ref(voter), "score": contribution})

        results.append({
            "player": ref(proposer),
            "proposal": proposal,
            "score": score,
            "score_list": score_list,
            "block_timestamp": block_timestamp,
        })

    return results
