# Area: Core Tests
"""Tests for commit-reveal hashes."""

import pytest
from eth_utils import keccak

from rankify_sdk.commitments import (
    ballot_hash,
    check_vote_budget,
    proposer_hidden,
    turn_players_salt,
    vote_cost,
)
from rankify_sdk.errors import MalformedInputError

PLAYER = "0x1111111111111111111111111111111111111111"
SALT = bytes([7]) * 32


class TestTurnPlayersSalt:
    def test_packs_address_and_uint256(self):
        expected = keccak(bytes.fromhex(PLAYER[2:]) + (99).to_bytes(32, "big"))
        assert turn_players_salt(PLAYER, 99) == expected

    def test_invalid_player_rejected(self):
        with pytest.raises(MalformedInputError):
            turn_players_salt("not-an-address", 99)


class TestProposerHidden:
    def test_packs_address_and_bytes32(self):
        expected = keccak(bytes.fromhex(PLAYER[2:]) + SALT)
        assert proposer_hidden(PLAYER, SALT) == expected

    def test_accepts_salt_from_turn_players_salt(self):
        salt = turn_players_salt(PLAYER, 1)
        assert len(proposer_hidden(PLAYER, salt)) == 32

    def test_short_salt_rejected(self):
        with pytest.raises(MalformedInputError):
            proposer_hidden(PLAYER, SALT[:16])


class TestBallotHash:
    def test_array_elements_padded_to_32_bytes(self):
        expected = keccak((1).to_bytes(32, "big") + (2).to_bytes(32, "big") + SALT)
        assert ballot_hash([1, 2], SALT) == expected

    def test_hex_salt_accepted(self):
        assert ballot_hash([3, 0], "0x" + SALT.hex()) == ballot_hash([3, 0], SALT)

    def test_negative_vote_rejected(self):
        with pytest.raises(MalformedInputError):
            ballot_hash([-1, 2], SALT)


class TestVoteBudget:
    def test_cost_is_sum_of_squares(self):
        assert vote_cost([2, 2, 2]) == 12

    def test_within_budget(self):
        check_vote_budget([4, 0, 0], 16)

    def test_over_budget_rejected(self):
        with pytest.raises(MalformedInputError) as exc:
            check_vote_budget([2, 2, 3], 16)
        assert "17" in exc.value.reason
