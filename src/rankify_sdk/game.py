# Area: Orchestration
"""
rankify_sdk.game — Reading games through a data source
======================================================

Stateless functions that fetch what a query needs from a
``GameStateSource`` and hand it to the pure core.

Independent fetches of one query are issued concurrently and joined
before the pure step runs. A fetch that raises propagates its exception
unchanged; nothing here retries.

Usage
-----
    from rankify_sdk import GameStateSource, IndexerEventSource, get_historic_turn

    source = GameStateSource(
        events=IndexerEventSource(),
        state=my_state_reader,
        contract_address="0x5FbDB2315678afecb367f032d93F642f64180aa3",
        chain_id=97113,
    )
    results = get_historic_turn(source, game_id=7, turn=2)
"""

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from .errors import NotFoundError
from .events import GameState
from .keys import KeyMaterial, derive_shared_key
from .permutations import active_permutation
from .phase import GamePhase, classify_game_phase
from .reconstruction import reconstruct_turn
from .sources import EventSource, StateReader
from .types import PlayerTurnResult

logger = logging.getLogger("rankify_sdk")

T = TypeVar("T")


@dataclass(frozen=True)
class GameStateSource:
    """
    Everything needed to read games of one instance contract.

    Attributes:
        events: Historical event source
        state: On-chain state reader, None when only events are available
        contract_address: Instance contract address
        chain_id: Chain the instance is deployed on
    """

    events: EventSource
    state: Optional[StateReader]
    contract_address: str
    chain_id: int

    def require_state(self) -> StateReader:
        if self.state is None:
            raise ValueError("This query needs a state reader; GameStateSource.state is None")
        return self.state


def expect_single(events: Sequence[T], entity: str, identifiers: Dict[str, Any]) -> T:
    """
    Return the only event in ``events``.

    Raises
    ------
    NotFoundError
        If there are zero or several events.
    """
    if len(events) != 1:
        logger.error(f"{entity} lookup for {identifiers} returned {len(events)} events")
        raise NotFoundError(entity, identifiers, count=len(events))
    return events[0]


def _fan_out(*fetches: Callable[[], Any]) -> List[Any]:
    """Run independent fetches concurrently and return results in order."""
    with ThreadPoolExecutor(max_workers=len(fetches)) as pool:
        futures = [pool.submit(fetch) for fetch in fetches]
        return [future.result() for future in futures]


def get_game_state(source: GameStateSource, game_id: int) -> GameState:
    return source.require_state().get_game_state(game_id, source.contract_address)


def get_game_phase(source: GameStateSource, game_id: int) -> GamePhase:
    """Classify a game's current phase from its on-chain state."""
    state = get_game_state(source, game_id)
    phase = classify_game_phase(state.phase_flags())
    logger.info(f"Game {game_id} phase: {phase.display}")
    return phase


def get_historic_turn(
    source: GameStateSource,
    game_id: int,
    turn: int,
    vote_credits: Optional[int] = None,
) -> List[PlayerTurnResult]:
    """
    Reconstruct the per-player results of a finished turn.

    Args:
        source: Where to read events (and state when needed)
        game_id: Game identifier
        turn: Turn number
        vote_credits: Credit budget of the game; read from state if None

    Returns:
        One PlayerTurnResult per player in true order

    Raises:
        NotFoundError: If the turn's proposals-ended or voting-results
            event is missing or duplicated
        UpstreamError: If the data source fails
        MalformedInputError: If the events do not fit together
    """
    address = source.contract_address
    identifiers = {"game_id": game_id, "turn": turn, "contract_address": address}

    fetches: List[Callable[[], Any]] = [
        lambda: source.events.get_proposals_ended(game_id, turn, address),
        lambda: source.events.get_voting_results(game_id, turn, address),
    ]
    if vote_credits is None:
        fetches.append(lambda: get_game_state(source, game_id))

    fetched = _fan_out(*fetches)
    proposals_ended = expect_single(fetched[0], "ProposalsEnded", identifiers)
    voting = expect_single(fetched[1], "VotingResults", identifiers)
    if vote_credits is None:
        vote_credits = fetched[2].vote_credits

    permutation = voting.permutation
    if len(permutation) > len(voting.players):
        permutation = active_permutation(permutation, len(voting.players))

    logger.info(f"Reconstructing game {game_id} turn {turn} for {len(permutation)} players")
    return reconstruct_turn(
        proposals=proposals_ended.proposals,
        votes=voting.finalized_voting_matrix,
        permutation=permutation,
        vote_credits=vote_credits,
        players=voting.players,
        block_timestamp=voting.block_timestamp,
    )


def get_registration_deadline(
    source: GameStateSource,
    game_id: int,
    time_to_join: Optional[int] = None,
) -> int:
    """Timestamp at which registration closes."""
    address = source.contract_address
    identifiers = {"game_id": game_id, "contract_address": address}

    if time_to_join is None:
        events, state = _fan_out(
            lambda: source.events.get_registration_open(game_id, address),
            lambda: get_game_state(source, game_id),
        )
        time_to_join = state.time_to_join
    else:
        events = source.events.get_registration_open(game_id, address)

    registration = expect_single(events, "RegistrationOpen", identifiers)
    return registration.block_timestamp + time_to_join


def get_game_start_block(source: GameStateSource, game_id: int) -> int:
    """Block number in which the game started."""
    identifiers = {"game_id": game_id, "contract_address": source.contract_address}
    events = source.events.get_game_started(game_id, source.contract_address)
    return expect_single(events, "GameStarted", identifiers).block_number


def get_final_scores(source: GameStateSource, game_id: int) -> Dict[str, int]:
    """Final score per player address of a finished game."""
    identifiers = {"game_id": game_id, "contract_address": source.contract_address}
    events = source.events.get_game_over(game_id, source.contract_address)
    return expect_single(events, "GameOver", identifiers).final_scores()


def derive_turn_key(
    source: GameStateSource,
    private_key: KeyMaterial,
    public_key: KeyMaterial,
    game_id: int,
    turn: int,
) -> bytes:
    """Shared player/game master key for a turn of this instance."""
    return derive_shared_key(
        private_key=private_key,
        public_key=public_key,
        game_id=game_id,
        turn=turn,
        contract_address=source.contract_address,
        chain_id=source.chain_id,
    )
