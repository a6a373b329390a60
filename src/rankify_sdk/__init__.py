"""
rankify_sdk — Rankify game client SDK
=====================================

Anonymization and turn reconstruction for Rankify games. Proposals and
votes are published in a per-turn permuted order; this package reverses
the permutation, derives the per-turn keys players share with the game
master, and rebuilds per-player results of past turns.

Quick Start (pure core):
    from rankify_sdk import reconstruct_turn
    results = reconstruct_turn(proposals, votes, permutation, vote_credits=16)

Reading from an indexer:
    from rankify_sdk import GameStateSource, IndexerEventSource, get_historic_turn
    source = GameStateSource(events=IndexerEventSource(), state=None,
                             contract_address=address, chain_id=chain_id)
    results = get_historic_turn(source, game_id=1, turn=2, vote_credits=16)

Shared turn key (either side computes the same value):
    from rankify_sdk import derive_shared_key
    key = derive_shared_key(my_private_key, their_public_key, game_id, turn,
                            contract_address, chain_id)
"""

from .permutations import (
    apply_permutation,
    reverse_permutation,
    validate_permutation,
    generate_permutation,
    active_permutation,
)
from .keys import (
    derive_key,
    derive_shared_key,
    compute_shared_secret,
    public_key_from_private,
    public_key_to_address,
    turn_salt_message,
    game_key_message,
    seed_from_signature,
)
from .commitments import (
    turn_players_salt,
    proposer_hidden,
    ballot_hash,
    check_vote_budget,
)
from .encryption import (
    encrypt_proposal,
    decrypt_proposal,
    encrypt_votes,
    decrypt_votes,
    proposal_value,
    proposal_randomness,
)
from .phase import GamePhase, PhaseFlags, classify_game_phase
from .reconstruction import reconstruct_turn, max_votes
from .events import (
    ProposalsEnded,
    VotingResults,
    RegistrationOpen,
    GameStarted,
    GameOver,
    GameState,
)
from .sources import EventSource, StateReader
from .indexer import IndexerEventSource
from .game import (
    GameStateSource,
    get_historic_turn,
    get_game_phase,
    get_registration_deadline,
    get_game_start_block,
    get_final_scores,
    derive_turn_key,
)
from .errors import (
    RankifySDKError,
    MalformedInputError,
    NotFoundError,
    UpstreamError,
)
from .types import PlayerTurnResult, ScoreContribution

__all__ = [
    # Permutations
    "apply_permutation",
    "reverse_permutation",
    "validate_permutation",
    "generate_permutation",
    "active_permutation",
    # Keys
    "derive_key",
    "derive_shared_key",
    "compute_shared_secret",
    "public_key_from_private",
    "public_key_to_address",
    "turn_salt_message",
    "game_key_message",
    "seed_from_signature",
    # Commitments
    "turn_players_salt",
    "proposer_hidden",
    "ballot_hash",
    "check_vote_budget",
    # Encryption
    "encrypt_proposal",
    "decrypt_proposal",
    "encrypt_votes",
    "decrypt_votes",
    "proposal_value",
    "proposal_randomness",
    # Phase
    "GamePhase",
    "PhaseFlags",
    "classify_game_phase",
    # Reconstruction
    "reconstruct_turn",
    "max_votes",
    # Events
    "ProposalsEnded",
    "VotingResults",
    "RegistrationOpen",
    "GameStarted",
    "GameOver",
    "GameState",
    # Sources
    "EventSource",
    "StateReader",
    "IndexerEventSource",
    "GameStateSource",
    "get_historic_turn",
    "get_game_phase",
    "get_registration_deadline",
    "get_game_start_block",
    "get_final_scores",
    "derive_turn_key",
    # Errors
    "RankifySDKError",
    "MalformedInputError",
    "NotFoundError",
    "UpstreamError",
    # Result types
    "PlayerTurnResult",
    "ScoreContribution",
]
__version__ = "0.1.0"
