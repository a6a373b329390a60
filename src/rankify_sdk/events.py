# Area: Data Source
"""
rankify_sdk.events — Typed event and state shapes
=================================================

Pydantic models for everything read from the external data source.
Payloads are validated on ingress, so a missing field or a malformed
address fails here rather than deep inside reconstruction.

Field names are snake_case; the camelCase names used by the indexer and
the contract ABI are accepted as aliases:

    >>> RegistrationOpen.model_validate({"gameId": "7", "blockTimestamp": "1700000000"})
    RegistrationOpen(game_id=7, block_number=0, block_timestamp=1700000000)
"""

from __future__ import annotations
from typing import Annotated, Any, Dict, List, Mapping, Optional, Type, TypeVar

from eth_utils import is_address, to_checksum_address
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    NonNegativeInt,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .errors import UpstreamError
from .phase import PhaseFlags


def _checksum_address(value: str) -> str:
    if not is_address(value):
        raise ValueError(f"invalid address {value!r}")
    return to_checksum_address(value)


Address = Annotated[str, AfterValidator(_checksum_address)]


class _Shape(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ══════════════════════════════════════════════════════════════
# EVENTS
# ══════════════════════════════════════════════════════════════

class ProposalsEnded(_Shape):
    """Proposing stage closed; proposals are published in permuted order."""
    game_id: NonNegativeInt
    turn: NonNegativeInt
    proposals: List[str]
    num_proposals: NonNegativeInt
    block_number: NonNegativeInt = 0
    block_timestamp: Optional[NonNegativeInt] = None


class VotingResults(_Shape):
    """Voting stage closed; the finalized matrix and permutation are revealed."""
    game_id: NonNegativeInt
    turn: NonNegativeInt
    players: List[Address]
    finalized_voting_matrix: List[List[NonNegativeInt]]
    permutation: List[NonNegativeInt]
    block_number: NonNegativeInt = 0
    block_timestamp: Optional[NonNegativeInt] = None


class RegistrationOpen(_Shape):
    """Registration opened for a game."""
    game_id: NonNegativeInt
    block_number: NonNegativeInt = 0
    block_timestamp: NonNegativeInt


class GameStarted(_Shape):
    """First turn started."""
    game_id: NonNegativeInt
    block_number: NonNegativeInt
    block_timestamp: NonNegativeInt = 0


class GameOver(_Shape):
    """Game finished with final per-player scores."""
    game_id: NonNegativeInt
    players: List[Address]
    scores: List[NonNegativeInt]
    block_number: NonNegativeInt = 0
    block_timestamp: Optional[NonNegativeInt] = None

    @model_validator(mode="after")
    def _scores_match_players(self) -> "GameOver":
        if len(self.players) != len(self.scores):
            raise ValueError(
                f"{len(self.players)} players but {len(self.scores)} scores"
            )
        return self

    def final_scores(self) -> Dict[str, int]:
        """Map of player address to final score."""
        return dict(zip(self.players, self.scores))


# ══════════════════════════════════════════════════════════════
# ON-CHAIN STATE
# ══════════════════════════════════════════════════════════════

class GameState(_Shape):
    """
    Result of the instance's game state read.

    Attributes:
        has_ended: Game over flag
        is_overtime: Overtime flag
        is_last_turn: Final turn flag
        started_at: Start timestamp, 0 before start
        registration_open_at: Registration timestamp, 0 if never opened
        created_by: Creator address
        current_turn: Turn in progress, 0 before start
        time_per_turn: Seconds per turn
        time_to_join: Seconds registration stays open
        vote_credits: Per-player vote credit budget
        max_turns: Turn limit before overtime
    """
    has_ended: bool
    is_overtime: bool
    is_last_turn: bool = False
    started_at: NonNegativeInt
    registration_open_at: NonNegativeInt
    created_by: Address
    current_turn: NonNegativeInt
    time_per_turn: NonNegativeInt
    time_to_join: NonNegativeInt
    vote_credits: NonNegativeInt
    max_turns: NonNegativeInt
    min_player_cnt: Optional[NonNegativeInt] = None
    max_player_cnt: Optional[NonNegativeInt] = None
    game_master: Optional[Address] = None

    def phase_flags(self) -> PhaseFlags:
        return PhaseFlags(
            has_ended=self.has_ended,
            is_overtime=self.is_overtime,
            is_last_turn=self.is_last_turn,
            started_at=self.started_at,
            registration_open_at=self.registration_open_at,
            created_by=self.created_by,
        )


M = TypeVar("M", bound=BaseModel)


def parse_event(model: Type[M], payload: Mapping[str, Any], source: str) -> M:
    """
    Validate one raw payload against ``model``.

    Raises
    ------
    UpstreamError
        If the payload does not fit the shape.
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise UpstreamError(
            source,
            f"malformed {model.__name__} payload: {e.error_count()} validation error(s)",
            cause=e,
        ) from e
