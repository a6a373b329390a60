# Area: Core
"""
rankify_sdk.permutations — Per-turn permutation codec
=====================================================

A permutation maps a true player index ``i`` to the slot
``permutation[i]`` it occupies in the published (permuted) payload.

    apply_permutation(["a", "b", "c"], [2, 0, 1])   -> ["b", "c", "a"]
    reverse_permutation(["b", "c", "a"], [2, 0, 1]) -> ["a", "b", "c"]

Payloads read back from events may be over-allocated. Callers truncate
them to ``len(permutation)`` with :func:`truncate` *before* reversing;
the codec itself never truncates or pads.
"""

from __future__ import annotations
import logging
from typing import Any, List, Sequence, TypeVar, Union

from eth_abi.packed import encode_packed
from eth_utils import keccak

from .errors import MalformedInputError

logger = logging.getLogger("rankify_sdk")

T = TypeVar("T")

# Slots available in the on-chain permutation commitment
MAX_PERMUTATION_SIZE = 15

IndexLike = Union[int, str]


def validate_permutation(permutation: Sequence[IndexLike]) -> List[int]:
    """
    Check that ``permutation`` is a bijection over ``[0, len)``.

    Indexer payloads deliver indices as decimal strings, so those are
    accepted and converted.

    Returns
    -------
    list of int
        The permutation as plain ints.

    Raises
    ------
    MalformedInputError
        If an entry is not an integer, is out of range or repeats.
    """
    indices: List[int] = []
    for slot, raw in enumerate(permutation):
        if isinstance(raw, (bool, float)):
            raise MalformedInputError("permutation", f"entry {slot} is not an integer", raw)
        try:
            indices.append(int(raw))
        except (TypeError, ValueError):
            raise MalformedInputError("permutation", f"entry {slot} is not an integer", raw)

    size = len(indices)
    if sorted(indices) != list(range(size)):
        raise MalformedInputError(
            "permutation",
            f"not a bijection over [0, {size})",
            indices,
        )
    return indices


def _check_lengths(sequence: Sequence[Any], permutation: Sequence[int], field: str) -> None:
    if len(sequence) != len(permutation):
        raise MalformedInputError(
            field,
            f"length {len(sequence)} does not match permutation length {len(permutation)}",
        )


def apply_permutation(sequence: Sequence[T], permutation: Sequence[IndexLike]) -> List[T]:
    """Place ``sequence[i]`` at slot ``permutation[i]``."""
    indices = validate_permutation(permutation)
    _check_lengths(sequence, indices, "sequence")

    permuted: List[Any] = [None] * len(indices)
    for i, slot in enumerate(indices):
        permuted[slot] = sequence[i]
    return permuted


def reverse_permutation(permuted: Sequence[T], permutation: Sequence[IndexLike]) -> List[T]:
    """Recover the true order: ``result[i] = permuted[permutation[i]]``."""
    indices = validate_permutation(permutation)
    _check_lengths(permuted, indices, "permuted")

    return [permuted[slot] for slot in indices]


def truncate(sequence: Sequence[T], length: int) -> List[T]:
    """
    Cut an over-allocated payload down to ``length`` entries.

    A payload shorter than ``length`` is not padded; that is malformed.
    """
    if len(sequence) < length:
        raise MalformedInputError(
            "sequence",
            f"length {len(sequence)} is shorter than required {length}",
        )
    if len(sequence) > length:
        logger.debug(f"Truncating payload from {len(sequence)} to {length} entries")
    return list(sequence[:length])


def generate_permutation(
    secret: int,
    size: int,
    max_size: int = MAX_PERMUTATION_SIZE,
) -> List[int]:
    """
    Deterministic Fisher-Yates shuffle used by the game master.

    For ``i`` from ``size - 1`` down to ``0`` the swap partner is
    ``keccak256(abi.encodePacked(uint256 secret, uint256 i)) mod (i + 1)``.
    Slots ``size .. max_size - 1`` stay mapped to themselves so the result
    always has ``max_size`` entries.

    Parameters
    ----------
    secret : int
        The turn salt (uint256).
    size : int
        Number of active players.
    max_size : int
        Total slots in the committed permutation.
    """
    if not 1 <= size <= max_size:
        raise MalformedInputError("size", f"must be within [1, {max_size}]", size)
    if not 0 <= secret < 2 ** 256:
        raise MalformedInputError("secret", "must fit in uint256")

    permutation = list(range(max_size))
    for i in range(size - 1, -1, -1):
        rand = int.from_bytes(keccak(encode_packed(["uint256", "uint256"], [secret, i])), "big")
        j = rand % (i + 1)
        permutation[i], permutation[j] = permutation[j], permutation[i]

    return permutation


def active_permutation(permutation: Sequence[IndexLike], player_count: int) -> List[int]:
    """
    Trim a padded permutation down to its first ``player_count`` slots.

    Only valid when every slot past ``player_count`` maps to itself, which
    is how :func:`generate_permutation` pads inactive slots.
    """
    indices = validate_permutation(permutation)
    if player_count > len(indices):
        raise MalformedInputError(
            "permutation",
            f"has {len(indices)} slots for {player_count} players",
        )
    for slot in range(player_count, len(indices)):
        if indices[slot] != slot:
            raise MalformedInputError(
                "permutation",
                f"inactive slot {slot} is not mapped to itself",
                indices,
            )
    return indices[:player_count]
