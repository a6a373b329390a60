# Area: Core
"""
rankify_sdk.commitments — Commit-reveal hashes
==============================================

Hashes committed on chain before a value is revealed. All of them are
``keccak256(abi.encodePacked(...))`` so the contract can recompute them
at reveal time.
"""

from __future__ import annotations
from typing import Sequence

from eth_abi.packed import encode_packed
from eth_utils import keccak

from .errors import MalformedInputError
from .keys import KeyMaterial, as_address, as_bytes, as_uint256


def turn_players_salt(player: str, secret: int) -> bytes:
    """Per-player salt for a turn, derived from the game master's turn secret."""
    return keccak(encode_packed(
        ["address", "uint256"],
        [as_address(player, "player"), as_uint256(secret, "secret")],
    ))


def proposer_hidden(proposer: str, salt: KeyMaterial) -> bytes:
    """Hide a proposer's address behind their turn salt."""
    raw_salt = as_bytes(salt, "salt")
    if len(raw_salt) != 32:
        raise MalformedInputError("salt", f"expected 32 bytes, got {len(raw_salt)}")
    return keccak(encode_packed(["address", "bytes32"], [as_address(proposer, "proposer"), raw_salt]))


def ballot_hash(votes: Sequence[int], salt: KeyMaterial) -> bytes:
    """Commitment to a vote row, as checked when the ballot is revealed."""
    raw_salt = as_bytes(salt, "salt")
    if len(raw_salt) != 32:
        raise MalformedInputError("salt", f"expected 32 bytes, got {len(raw_salt)}")
    row = [as_uint256(v, "votes") for v in votes]
    return keccak(encode_packed(["uint256[]", "bytes32"], [row, raw_salt]))


def vote_cost(votes: Sequence[int]) -> int:
    """Quadratic cost of a vote row: each proposal costs votes squared."""
    return sum(as_uint256(v, "votes") ** 2 for v in votes)


def check_vote_budget(votes: Sequence[int], vote_credits: int) -> None:
    """
    Reject a vote row whose quadratic cost exceeds the credit budget.

    Raises
    ------
    MalformedInputError
        If ``sum(v * v)`` is greater than ``vote_credits``.
    """
    cost = vote_cost(votes)
    if cost > vote_credits:
        raise MalformedInputError(
            "votes",
            f"quadratic cost {cost} exceeds {vote_credits} vote credits",
            list(votes),
        )
