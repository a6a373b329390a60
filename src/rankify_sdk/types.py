"""
rankify_sdk.types — TypedDict schemas for reconstruction results
================================================================

This module documents the exact structure of the dictionaries returned
when a historic turn is reconstructed.

All types are exported from the main package:

    from rankify_sdk import PlayerTurnResult, ScoreContribution

Use __annotations__ to inspect fields:

    >>> ScoreContribution.__annotations__
    {'voter': typing.Union[str, int], 'score': int}
"""

from typing import List, Optional, TypedDict, Union


# Address when the player list is known, true player index otherwise
PlayerRef = Union[str, int]


class ScoreContribution(TypedDict):
    """One voter's positive contribution to a proposal's score."""
    voter: PlayerRef        # e.g., "0xAbC...", or 2
    score: int              # credits spent, or the idle-voter maximum


class PlayerTurnResult(TypedDict):
    """Reconstructed result of one player for one turn.

    Fields
    ------
    player : str or int
        Player address, or true player index if addresses are unknown.
    proposal : str
        Proposal text. Empty string means no submission.
    score : int
        Sum of all contributions from the other players.
    score_list : List[ScoreContribution]
        Per-voter contributions, zero contributions omitted.
    block_timestamp : int or None
        Timestamp of the block that closed the voting stage.
    """
    player: PlayerRef
    proposal: str
    score: int
    score_list: List[ScoreContribution]
    block_timestamp: Optional[int]
