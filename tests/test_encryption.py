# Area: Core Tests
"""Tests for proposal and vote encryption."""

import base64
import hashlib
import json

import pytest
from eth_utils import keccak

from rankify_sdk.encryption import (
    SALT_HEADER,
    decrypt_proposal,
    decrypt_text,
    decrypt_votes,
    encrypt_proposal,
    encrypt_text,
    encrypt_votes,
    evp_bytes_to_key,
    passphrase,
    proposal_randomness,
    proposal_value,
)
from rankify_sdk.errors import MalformedInputError
from rankify_sdk.keys import derive_shared_key, public_key_from_private

CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
CHAIN_ID = 97113
PLAYER_KEY = bytes.fromhex("4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318")
GM_KEY = bytes.fromhex("59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d")
SALT = bytes(range(8))


@pytest.fixture
def player_side_key():
    return derive_shared_key(PLAYER_KEY, public_key_from_private(GM_KEY), 3, 0, CONTRACT, CHAIN_ID)


@pytest.fixture
def gm_side_key():
    return derive_shared_key(GM_KEY, public_key_from_private(PLAYER_KEY), 3, 0, CONTRACT, CHAIN_ID)


class TestEnvelopeFormat:
    """The OpenSSL passphrase envelope crypto-js produces."""

    def test_salt_header_and_salt(self, player_side_key):
        raw = base64.b64decode(encrypt_text("hello", player_side_key, salt=SALT))
        assert raw[:8] == SALT_HEADER
        assert raw[8:16] == SALT
        assert len(raw[16:]) == 16

    def test_fixed_salt_is_deterministic(self, player_side_key):
        assert encrypt_text("hello", player_side_key, salt=SALT) == encrypt_text(
            "hello", player_side_key, salt=SALT
        )

    def test_random_salt_differs(self, player_side_key):
        assert encrypt_text("hello", player_side_key) != encrypt_text("hello", player_side_key)

    def test_passphrase_is_lowercase_hex_text(self):
        assert passphrase(bytes([0xAB]) * 32) == "0x" + "ab" * 32

    def test_evp_bytes_to_key_chains_md5_blocks(self):
        password = b"0x" + b"11" * 32
        key, iv = evp_bytes_to_key(password, SALT)
        first = hashlib.md5(password + SALT).digest()
        second = hashlib.md5(first + password + SALT).digest()
        third = hashlib.md5(second + password + SALT).digest()
        assert key == first + second
        assert iv == third

    def test_bad_salt_length(self, player_side_key):
        with pytest.raises(MalformedInputError):
            encrypt_text("hello", player_side_key, salt=b"short")


class TestProposalEncryption:
    """A proposal encrypted by the player is readable by the game master."""

    def test_player_encrypts_game_master_decrypts(self, player_side_key, gm_side_key):
        envelope = encrypt_proposal("Plant more trees", player_side_key)
        assert decrypt_proposal(envelope, gm_side_key) == "Plant more trees"

    def test_game_master_encrypts_player_decrypts(self, player_side_key, gm_side_key):
        envelope = encrypt_proposal("Plant more trees", gm_side_key)
        assert decrypt_proposal(envelope, player_side_key) == "Plant more trees"

    def test_unicode_and_empty_proposals(self, player_side_key, gm_side_key):
        for proposal in ("", "Élan vital ✓", "x" * 100):
            assert decrypt_proposal(encrypt_proposal(proposal, player_side_key), gm_side_key) == proposal

    def test_hex_key_accepted(self, player_side_key):
        envelope = encrypt_proposal("hi", "0x" + player_side_key.hex(), salt=SALT)
        assert envelope == encrypt_proposal("hi", player_side_key, salt=SALT)

    def test_wrong_key_does_not_recover_plaintext(self, player_side_key):
        envelope = encrypt_proposal("secret plan", player_side_key, salt=SALT)
        other_key = keccak(player_side_key)
        try:
            recovered = decrypt_proposal(envelope, other_key)
        except MalformedInputError:
            return
        assert recovered != "secret plan"

    def test_short_key_rejected(self):
        with pytest.raises(MalformedInputError):
            encrypt_proposal("hi", bytes(31))


class TestMalformedEnvelopes:
    def test_not_base64(self, player_side_key):
        with pytest.raises(MalformedInputError):
            decrypt_text("not base64!!", player_side_key)

    def test_missing_header(self, player_side_key):
        envelope = base64.b64encode(b"Peppered" + SALT + bytes(16)).decode()
        with pytest.raises(MalformedInputError):
            decrypt_text(envelope, player_side_key)

    def test_partial_block(self, player_side_key):
        envelope = base64.b64encode(SALT_HEADER + SALT + bytes(10)).decode()
        with pytest.raises(MalformedInputError):
            decrypt_text(envelope, player_side_key)

    def test_empty_body(self, player_side_key):
        envelope = base64.b64encode(SALT_HEADER + SALT).decode()
        with pytest.raises(MalformedInputError):
            decrypt_text(envelope, player_side_key)


class TestVoteEncryption:
    def test_round_trip_between_player_and_game_master(self, player_side_key, gm_side_key):
        envelope = encrypt_votes([3, 0, 1], player_side_key)
        assert decrypt_votes(envelope, gm_side_key) == [3, 0, 1]

    def test_plaintext_is_json_string_list(self, player_side_key):
        envelope = encrypt_votes([3, 0, 1], player_side_key)
        assert decrypt_text(envelope, player_side_key) == '["3","0","1"]'

    def test_numeric_json_accepted(self, player_side_key):
        envelope = encrypt_text(json.dumps([2, 2]), player_side_key)
        assert decrypt_votes(envelope, player_side_key) == [2, 2]

    def test_negative_vote_rejected(self, player_side_key):
        with pytest.raises(MalformedInputError):
            encrypt_votes([1, -1], player_side_key)

    def test_non_list_payload_rejected(self, player_side_key):
        envelope = encrypt_text('{"votes": [1]}', player_side_key)
        with pytest.raises(MalformedInputError):
            decrypt_votes(envelope, player_side_key)

    def test_non_numeric_vote_rejected(self, player_side_key):
        envelope = encrypt_text('["1","x"]', player_side_key)
        with pytest.raises(MalformedInputError):
            decrypt_votes(envelope, player_side_key)

    def test_non_json_payload_rejected(self, player_side_key):
        envelope = encrypt_proposal("plain words", player_side_key)
        with pytest.raises(MalformedInputError):
            decrypt_votes(envelope, player_side_key)


class TestCommitmentInputs:
    def test_proposal_value_hashes_utf8(self):
        assert proposal_value("idea") == int.from_bytes(keccak(b"idea"), "big")

    def test_randomness_hashes_hex_text_of_key(self, player_side_key):
        expected = keccak(("0x" + player_side_key.hex()).encode("ascii"))
        assert proposal_randomness(player_side_key) == int.from_bytes(expected, "big")

    def test_both_sides_agree_on_randomness(self, player_side_key, gm_side_key):
        assert proposal_randomness(player_side_key) == proposal_randomness(gm_side_key)
