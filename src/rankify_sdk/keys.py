# Area: Core
"""
rankify_sdk.keys — Per-turn key derivation
==========================================

Two derivations, both pure:

derive_key (pkdf)
    keccak256(abi.encodePacked(
        bytes32 base_secret, uint256 game_id, uint256 turn,
        address contract_address, uint256 chain_id,
        bytes32 keccak256(scope)))

derive_shared_key (shared signer)
    ECDH on secp256k1 between one party's private key and the other
    party's public key. The shared point is serialized compressed,
    hashed once with keccak256 and used as ``base_secret`` for
    ``derive_key`` with scope "default".

Wallet-signed seeds
    ``turn_salt_message`` and ``game_key_message`` build what the game
    master signs; ``seed_from_signature`` hashes the signature.

The packed preimage must match what the instance contract computes, so
every field is encoded with ``eth_abi.packed`` at its natural width.
"""

from __future__ import annotations
import logging
from typing import Union

from ecdsa import SigningKey, VerifyingKey, SECP256k1
from ecdsa.errors import MalformedPointError
from eth_abi.packed import encode_packed
from eth_utils import decode_hex, is_address, keccak, to_checksum_address

from .errors import MalformedInputError

logger = logging.getLogger("rankify_sdk")

KeyMaterial = Union[bytes, bytearray, str]

DEFAULT_SCOPE = "default"

PRIVATE_KEY_LENGTH = 32
PUBLIC_KEY_LENGTHS = (33, 64, 65)

_DERIVATION_TYPES = ["bytes32", "uint256", "uint256", "address", "uint256", "bytes32"]


# ──────────────────────────────────────────────────────────────
# Input coercion
# ──────────────────────────────────────────────────────────────

def as_bytes(value: KeyMaterial, field: str) -> bytes:
    """Accept raw bytes or a hex string (with or without ``0x``)."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return decode_hex(value)
        except ValueError:
            raise MalformedInputError(field, "not a hex string")
    raise MalformedInputError(field, f"expected bytes or hex string, got {type(value).__name__}")


def as_uint256(value: int, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedInputError(field, "expected an unsigned integer", value)
    if not 0 <= value < 2 ** 256:
        raise MalformedInputError(field, "out of uint256 range", value)
    return value


def as_address(value: str, field: str = "contract_address") -> str:
    """Validate an address and return it checksummed."""
    if not isinstance(value, str) or not is_address(value):
        raise MalformedInputError(field, "not a valid address", value)
    return to_checksum_address(value)


def _fixed_bytes(value: KeyMaterial, field: str, length: int) -> bytes:
    raw = as_bytes(value, field)
    if len(raw) != length:
        raise MalformedInputError(field, f"expected {length} bytes, got {len(raw)}")
    return raw


def _signing_key(private_key: KeyMaterial) -> SigningKey:
    raw = _fixed_bytes(private_key, "private_key", PRIVATE_KEY_LENGTH)
    try:
        return SigningKey.from_string(raw, curve=SECP256k1)
    except MalformedPointError:
        raise MalformedInputError("private_key", "scalar out of curve order range")


def _verifying_key(public_key: KeyMaterial) -> VerifyingKey:
    raw = as_bytes(public_key, "public_key")
    if len(raw) not in PUBLIC_KEY_LENGTHS:
        raise MalformedInputError(
            "public_key",
            f"expected one of {PUBLIC_KEY_LENGTHS} bytes, got {len(raw)}",
        )
    try:
        return VerifyingKey.from_string(raw, curve=SECP256k1)
    except MalformedPointError:
        raise MalformedInputError("public_key", "not a point on secp256k1")


# ──────────────────────────────────────────────────────────────
# Derivation
# ──────────────────────────────────────────────────────────────

def derivation_preimage(
    base_secret: KeyMaterial,
    game_id: int,
    turn: int,
    contract_address: str,
    chain_id: int,
    scope: str = DEFAULT_SCOPE,
) -> bytes:
    """Packed preimage hashed by :func:`derive_key` (180 bytes)."""
    if not isinstance(scope, str) or not scope:
        raise MalformedInputError("scope", "must be a non-empty string", scope)
    return encode_packed(
        _DERIVATION_TYPES,
        [
            _fixed_bytes(base_secret, "base_secret", 32),
            as_uint256(game_id, "game_id"),
            as_uint256(turn, "turn"),
            as_address(contract_address),
            as_uint256(chain_id, "chain_id"),
            keccak(text=scope),
        ],
    )


def derive_key(
    base_secret: KeyMaterial,
    game_id: int,
    turn: int,
    contract_address: str,
    chain_id: int,
    scope: str = DEFAULT_SCOPE,
) -> bytes:
    """
    Derive a 32-byte key bound to a game, turn, contract and chain.

    Parameters
    ----------
    base_secret : bytes or hex str
        32-byte secret, a private key or a hashed ECDH secret.
    game_id, turn, chain_id : int
        Encoded as uint256.
    contract_address : str
        Instance contract address.
    scope : str
        Domain separation tag, e.g. "default" or "turnSalt".

    Raises
    ------
    MalformedInputError
        On a wrong-length secret, an invalid address or out-of-range ints.
    """
    return keccak(derivation_preimage(base_secret, game_id, turn, contract_address, chain_id, scope))


def compute_shared_secret(private_key: KeyMaterial, public_key: KeyMaterial) -> bytes:
    """ECDH on secp256k1, returning the shared point compressed (33 bytes)."""
    signing_key = _signing_key(private_key)
    verifying_key = _verifying_key(public_key)

    shared_point = verifying_key.pubkey.point * signing_key.privkey.secret_multiplier
    shared = VerifyingKey.from_public_point(shared_point, curve=SECP256k1)
    return shared.to_string("compressed")


def derive_shared_key(
    private_key: KeyMaterial,
    public_key: KeyMaterial,
    game_id: int,
    turn: int,
    contract_address: str,
    chain_id: int,
) -> bytes:
    """
    Derive the key a player and the game master share for one turn.

    Either side passes its own private key and the other side's public
    key and obtains the same result.
    """
    strengthened = keccak(compute_shared_secret(private_key, public_key))
    logger.debug(f"Derived shared secret for game {game_id}, turn {turn}")
    return derive_key(strengthened, game_id, turn, contract_address, chain_id, DEFAULT_SCOPE)


# ──────────────────────────────────────────────────────────────
# Key helpers
# ──────────────────────────────────────────────────────────────

def public_key_from_private(private_key: KeyMaterial, compressed: bool = False) -> bytes:
    """Public key for ``private_key``: 65 bytes (0x04 prefix) or 33 compressed."""
    verifying_key = _signing_key(private_key).get_verifying_key()
    return verifying_key.to_string("compressed" if compressed else "uncompressed")


def public_key_to_address(public_key: KeyMaterial) -> str:
    """Checksummed address owning ``public_key``."""
    point = _verifying_key(public_key).to_string("raw")
    return to_checksum_address(keccak(point)[-20:])


# ──────────────────────────────────────────────────────────────
# Wallet-signed seeds
# ──────────────────────────────────────────────────────────────
#
# The game master's turn secret and game key come from wallet signatures
# over fixed messages. The wallet signs the ``0x``-hex text of the
# message as a personal message; signing is the caller's business, these
# helpers only build the messages and hash the resulting signature.

SIGNATURE_LENGTH = 65


def turn_salt_message(game_id: int, turn: int, verifier_address: str, chain_id: int) -> bytes:
    """Message the game master signs to obtain a turn's secret."""
    return keccak(encode_packed(
        ["uint256", "uint256", "address", "uint256"],
        [
            as_uint256(game_id, "game_id"),
            as_uint256(turn, "turn"),
            as_address(verifier_address, "verifier_address"),
            as_uint256(chain_id, "chain_id"),
        ],
    ))


def game_key_message(game_id: int, contract_address: str) -> bytes:
    """Message the game master signs to obtain a game's private key."""
    return encode_packed(
        ["uint256", "address", "string"],
        [as_uint256(game_id, "game_id"), as_address(contract_address), "gameKey"],
    )


def seed_from_signature(signature: KeyMaterial) -> bytes:
    """
    keccak256 of a 65-byte signature.

    Used as the game key directly, or read as a uint256 for the turn
    secret passed to ``generate_permutation`` and ``turn_players_salt``.
    """
    return keccak(_fixed_bytes(signature, "signature", SIGNATURE_LENGTH))
