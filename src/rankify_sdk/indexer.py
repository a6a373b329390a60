# Area: Data Source
"""
rankify_sdk.indexer — GraphQL indexer event source
==================================================

Reads historical instance events from an Envio-style GraphQL indexer.
Each method issues one POST and validates every returned row against the
matching ``rankify_sdk.events`` model.

No retries and no fallback: transport failures, HTTP errors, GraphQL
``errors`` and rows that do not fit their shape all raise
``UpstreamError`` after being logged.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel

from ._shared.graphql import EVENT_ENTITIES, build_event_query
from .errors import UpstreamError
from .events import (
    GameOver,
    GameStarted,
    ProposalsEnded,
    RegistrationOpen,
    VotingResults,
    parse_event,
)
from .keys import as_address
from .sources import EventSource

logger = logging.getLogger("rankify_sdk")

DEFAULT_ENDPOINT = "http://localhost:8080/v1/graphql"
DEFAULT_TIMEOUT_SECONDS = 30

SOURCE_NAME = "indexer"

M = TypeVar("M", bound=BaseModel)


class IndexerEventSource(EventSource):
    """
    Event source backed by the GraphQL indexer.

    Usage
    -----
        from rankify_sdk import IndexerEventSource

        source = IndexerEventSource(endpoint="https://indexer.example/v1/graphql")
        events = source.get_voting_results(7, 2, "0x5FbDB2315678afecb367f032d93F642f64180aa3")
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {"Content-Type": "application/json"}
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"

        logger.debug(f"Initializing IndexerEventSource with endpoint: {endpoint}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "IndexerEventSource":
        """Build from a config dict as returned by ``config.load_config``."""
        return cls(
            endpoint=config.get("indexer_url", DEFAULT_ENDPOINT),
            api_key=config.get("indexer_api_key"),
            timeout=config.get("request_timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
        )

    # ──────────────────────────────────────────────────────────────
    # EventSource
    # ──────────────────────────────────────────────────────────────

    def get_proposals_ended(self, game_id: int, turn: int, contract_address: str) -> List[ProposalsEnded]:
        return self._events(ProposalsEnded, "proposals_ended", game_id, contract_address, turn)

    def get_voting_results(self, game_id: int, turn: int, contract_address: str) -> List[VotingResults]:
        return self._events(VotingResults, "voting_results", game_id, contract_address, turn)

    def get_registration_open(self, game_id: int, contract_address: str) -> List[RegistrationOpen]:
        return self._events(RegistrationOpen, "registration_open", game_id, contract_address)

    def get_game_started(self, game_id: int, contract_address: str) -> List[GameStarted]:
        return self._events(GameStarted, "game_started", game_id, contract_address)

    def get_game_over(self, game_id: int, contract_address: str) -> List[GameOver]:
        return self._events(GameOver, "game_over", game_id, contract_address)

    # ──────────────────────────────────────────────────────────────
    # Transport
    # ──────────────────────────────────────────────────────────────

    def _events(
        self,
        model: Type[M],
        kind: str,
        game_id: int,
        contract_address: str,
        turn: Optional[int] = None,
    ) -> List[M]:
        variables: Dict[str, Any] = {
            "gameId": game_id,
            "contractAddress": as_address(contract_address),
        }
        if turn is not None:
            variables["turn"] = turn

        rows = self._query(kind, variables)
        return [parse_event(model, row, SOURCE_NAME) for row in rows]

    def _query(self, kind: str, variables: Dict[str, Any]) -> List[Dict[str, Any]]:
        """POST one query and return the entity rows."""
        entity = EVENT_ENTITIES[kind]
        payload = {"query": build_event_query(kind), "variables": variables}

        try:
            response = self._session.post(
                self.endpoint,
                json=payload,
                headers=self._headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            logger.error(f"Error fetching {entity.name} events: {e}")
            raise UpstreamError(SOURCE_NAME, f"{entity.name} request failed", cause=e) from e

        if not isinstance(body, dict):
            raise UpstreamError(SOURCE_NAME, f"{entity.name} response is not a JSON object")

        errors = body.get("errors")
        if errors:
            message = errors[0].get("message", "unknown error") if isinstance(errors[0], dict) else str(errors[0])
            logger.error(f"Indexer rejected {entity.name} query: {message}")
            raise UpstreamError(SOURCE_NAME, f"{entity.name} query failed: {message}")

        rows = (body.get("data") or {}).get(entity.name)
        if not isinstance(rows, list):
            raise UpstreamError(SOURCE_NAME, f"{entity.name} missing from response data")

        logger.debug(f"Indexer returned {len(rows)} {entity.name} event(s) for {variables}")
        return rows
