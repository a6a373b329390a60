# Area: Indexer
"""
rankify_sdk._shared.graphql — GraphQL documents for the event indexer
=====================================================================

Query documents for the Envio-style indexer. Each event kind maps to an
indexer entity, the fields selected from it and whether it is keyed by
turn in addition to game and contract.
"""

from __future__ import annotations
from typing import Dict, List, NamedTuple


class EventEntity(NamedTuple):
    """An indexed event entity and the fields selected from it."""
    name: str
    fields: List[str]
    by_turn: bool


EVENT_ENTITIES: Dict[str, EventEntity] = {
    "proposals_ended": EventEntity(
        name="RankifyInstance_ProposingStageEnded",
        fields=["gameId", "turn", "numProposals", "proposals",
                "blockNumber", "blockTimestamp", "srcAddress"],
        by_turn=True,
    ),
    "voting_results": EventEntity(
        name="RankifyInstance_VotingStageResults",
        fields=["gameId", "turn", "players", "finalizedVotingMatrix", "permutation",
                "blockNumber", "blockTimestamp", "srcAddress"],
        by_turn=True,
    ),
    "registration_open": EventEntity(
        name="RankifyInstance_RegistrationOpen",
        fields=["gameId", "blockNumber", "blockTimestamp", "srcAddress"],
        by_turn=False,
    ),
    "game_started": EventEntity(
        name="RankifyInstance_GameStarted",
        fields=["gameId", "blockNumber", "blockTimestamp", "srcAddress"],
        by_turn=False,
    ),
    "game_over": EventEntity(
        name="RankifyInstance_GameOver",
        fields=["gameId", "players", "scores", "blockNumber", "blockTimestamp", "srcAddress"],
        by_turn=False,
    ),
}


def build_event_query(kind: str, limit: int = 2) -> str:
    """
    Build the GraphQL document for one event kind.

    The default limit of 2 is enough to tell "exactly one" from "more
    than one" without paging through duplicates.

    Raises
    ------
    KeyError
        If ``kind`` is not a known event kind.
    """
    entity = EVENT_ENTITIES[kind]

    params = ["$gameId: Int!", "$contractAddress: String!"]
    where_parts = ["gameId: { _eq: $gameId }"]
    if entity.by_turn:
        params.insert(1, "$turn: Int!")
        where_parts.append("turn: { _eq: $turn }")
    where_parts.append("srcAddress: { _eq: $contractAddress }")

    operation = "Get" + entity.name.split("_", 1)[1] + "Events"
    selection = "\n".join(f"      {field}" for field in entity.fields)

    return (
        f"query {operation}({', '.join(params)}) {{\n"
        f"  {entity.name}(\n"
        f"    where: {{ {', '.join(where_parts)} }}\n"
        f"    limit: {limit}\n"
        f"  ) {{\n"
        f"{selection}\n"
        f"  }}\n"
        f"}}"
    )
