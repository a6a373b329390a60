# Area: Data Source
"""
rankify_sdk.sources — External data source interfaces
=====================================================

The SDK never talks to a chain or an indexer directly from its pure
core. Subclass these to plug in a data source; ``IndexerEventSource``
in ``rankify_sdk.indexer`` is the bundled event source.

Every event method returns a list: the caller, not the source, decides
whether zero or several matches are an error. Sources do not retry;
a failed fetch raises ``UpstreamError``.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import (
    GameOver,
    GameStarted,
    GameState,
    ProposalsEnded,
    RegistrationOpen,
    VotingResults,
)


class EventSource(ABC):
    """
    Historical events keyed by game, turn and instance contract address.
    """

    @abstractmethod
    def get_proposals_ended(
        self, game_id: int, turn: int, contract_address: str
    ) -> List[ProposalsEnded]:
        """Proposing-stage-ended events for one turn."""

    @abstractmethod
    def get_voting_results(
        self, game_id: int, turn: int, contract_address: str
    ) -> List[VotingResults]:
        """Voting-stage-results events for one turn."""

    @abstractmethod
    def get_registration_open(
        self, game_id: int, contract_address: str
    ) -> List[RegistrationOpen]:
        """Registration-open events for a game."""

    @abstractmethod
    def get_game_started(
        self, game_id: int, contract_address: str
    ) -> List[GameStarted]:
        """Game-started events for a game."""

    @abstractmethod
    def get_game_over(
        self, game_id: int, contract_address: str
    ) -> List[GameOver]:
        """Game-over events for a game."""


class StateReader(ABC):
    """
    Current on-chain state of a game instance.
    """

    @abstractmethod
    def get_game_state(self, game_id: int, contract_address: str) -> GameState:
        """
        Read the game state.

        Returns
        -------
        GameState
            Validated state. Implementations should build it with
            ``events.parse_event`` so malformed reads surface as
            ``UpstreamError``.
        """
