# Area: Core
"""
rankify_sdk.encryption — Proposal and vote encryption
=====================================================

Proposals and vote rows travel on chain encrypted under the key a player
shares with the game master (``keys.derive_shared_key``). The format is
the one produced by crypto-js ``AES.encrypt(text, passphrase)``:

    base64("Salted__" || salt[8] || AES-256-CBC(PKCS#7(utf8(text))))

where key and IV come from OpenSSL's ``EVP_BytesToKey`` (MD5, one
iteration) over the passphrase and salt. The passphrase is the shared
key written as lowercase ``0x``-hex text, not the raw 32 bytes.

Vote rows are encrypted as a JSON array of decimal strings,
e.g. ``["3","0","1"]``.
"""

from __future__ import annotations
import base64
import binascii
import json
import logging
from typing import List, Optional, Sequence, Tuple

from Crypto.Cipher import AES
from Crypto.Hash import MD5
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad, unpad
from eth_abi.packed import encode_packed
from eth_utils import keccak

from .errors import MalformedInputError
from .keys import KeyMaterial, as_bytes, as_uint256

logger = logging.getLogger("rankify_sdk")

SALT_HEADER = b"Salted__"
SALT_LENGTH = 8
KEY_LENGTH = 32
IV_LENGTH = 16
SHARED_KEY_LENGTH = 32


def passphrase(shared_key: KeyMaterial) -> str:
    """The shared key as the hex text used for encryption and randomness."""
    raw = as_bytes(shared_key, "shared_key")
    if len(raw) != SHARED_KEY_LENGTH:
        raise MalformedInputError("shared_key", f"expected {SHARED_KEY_LENGTH} bytes, got {len(raw)}")
    return "0x" + raw.hex()


def evp_bytes_to_key(password: bytes, salt: bytes) -> Tuple[bytes, bytes]:
    """OpenSSL EVP_BytesToKey with MD5 and one iteration: (key, iv)."""
    derived = b""
    block = b""
    while len(derived) < KEY_LENGTH + IV_LENGTH:
        block = MD5.new(block + password + salt).digest()
        derived += block
    return derived[:KEY_LENGTH], derived[KEY_LENGTH:KEY_LENGTH + IV_LENGTH]


def encrypt_text(plaintext: str, shared_key: KeyMaterial, salt: Optional[bytes] = None) -> str:
    """
    Encrypt ``plaintext`` the way crypto-js does with a passphrase.

    Parameters
    ----------
    plaintext : str
        Text to encrypt.
    shared_key : bytes or hex str
        32-byte shared key.
    salt : bytes, optional
        8-byte salt. Random when omitted; pass one only for reproducible
        output.

    Returns
    -------
    str
        Base64 OpenSSL envelope.
    """
    if salt is None:
        salt = get_random_bytes(SALT_LENGTH)
    elif len(salt) != SALT_LENGTH:
        raise MalformedInputError("salt", f"expected {SALT_LENGTH} bytes, got {len(salt)}")

    key, iv = evp_bytes_to_key(passphrase(shared_key).encode("ascii"), salt)
    ciphertext = AES.new(key, AES.MODE_CBC, iv).encrypt(pad(plaintext.encode("utf-8"), AES.block_size))
    return base64.b64encode(SALT_HEADER + salt + ciphertext).decode("ascii")


def decrypt_text(envelope: str, shared_key: KeyMaterial) -> str:
    """
    Decrypt a crypto-js passphrase envelope.

    Raises
    ------
    MalformedInputError
        If the envelope is not base64, lacks the salt header, has a bad
        length, or does not decrypt to valid UTF-8 under ``shared_key``.
    """
    try:
        raw = base64.b64decode(envelope, validate=True)
    except (binascii.Error, ValueError, TypeError):
        raise MalformedInputError("ciphertext", "not base64")

    header_length = len(SALT_HEADER) + SALT_LENGTH
    body = raw[header_length:]
    if not raw.startswith(SALT_HEADER):
        raise MalformedInputError("ciphertext", "missing Salted__ header")
    if not body or len(body) % AES.block_size:
        raise MalformedInputError("ciphertext", f"body of {len(body)} bytes is not whole AES blocks")

    salt = raw[len(SALT_HEADER):header_length]
    key, iv = evp_bytes_to_key(passphrase(shared_key).encode("ascii"), salt)
    try:
        padded = AES.new(key, AES.MODE_CBC, iv).decrypt(body)
        return unpad(padded, AES.block_size).decode("utf-8")
    except ValueError:
        logger.debug("Decryption failed: bad padding or non UTF-8 plaintext")
        raise MalformedInputError("ciphertext", "wrong key or corrupted payload")


def encrypt_proposal(proposal: str, shared_key: KeyMaterial, salt: Optional[bytes] = None) -> str:
    return encrypt_text(proposal, shared_key, salt)


def decrypt_proposal(envelope: str, shared_key: KeyMaterial) -> str:
    return decrypt_text(envelope, shared_key)


def encrypt_votes(votes: Sequence[int], shared_key: KeyMaterial, salt: Optional[bytes] = None) -> str:
    """Encrypt a vote row as a JSON array of decimal strings."""
    row = [str(as_uint256(v, "votes")) for v in votes]
    return encrypt_text(json.dumps(row, separators=(",", ":")), shared_key, salt)


def decrypt_votes(envelope: str, shared_key: KeyMaterial) -> List[int]:
    """Decrypt a vote row back into ints."""
    plaintext = decrypt_text(envelope, shared_key)
    try:
        row = json.loads(plaintext)
    except ValueError:
        raise MalformedInputError("votes", "decrypted payload is not JSON")
    if not isinstance(row, list):
        raise MalformedInputError("votes", "decrypted payload is not a list", row)

    votes: List[int] = []
    for cell in row:
        if isinstance(cell, bool) or not isinstance(cell, (str, int)):
            raise MalformedInputError("votes", "vote is not an integer", cell)
        try:
            votes.append(as_uint256(int(cell), "votes"))
        except ValueError:
            raise MalformedInputError("votes", "vote is not an integer", cell)
    return votes


# Inputs of the on-chain proposal commitment; the commitment itself is not computed here

def proposal_value(proposal: str) -> int:
    """keccak256(abi.encodePacked(string proposal)) as an integer."""
    return int.from_bytes(keccak(encode_packed(["string"], [proposal])), "big")


def proposal_randomness(shared_key: KeyMaterial) -> int:
    """keccak256(abi.encodePacked(string sharedKeyHex)) as an integer."""
    return int.from_bytes(keccak(encode_packed(["string"], [passphrase(shared_key)])), "big")
