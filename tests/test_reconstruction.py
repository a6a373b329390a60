# Area: Core Tests
"""Tests for historic turn reconstruction."""

import pytest

from rankify_sdk.errors import MalformedInputError
from rankify_sdk.reconstruction import max_votes, reconstruct_turn, reverse_vote_matrix

ALICE = "0x1111111111111111111111111111111111111111"
BOB = "0x2222222222222222222222222222222222222222"
CAROL = "0x3333333333333333333333333333333333333333"
PLAYERS = [ALICE, BOB, CAROL]

# True-order votes: rows voter, columns proposer. Carol (2) is idle.
TRUE_VOTES = [
    [0, 3, 1],
    [2, 0, 2],
    [0, 0, 0],
]

# Same turn as published with permutation [2, 0, 1]
PERMUTATION = [2, 0, 1]
PERMUTED_PROPOSALS = ["bob's idea", "carol's idea", "alice's idea"]
PERMUTED_VOTES = [
    [0, 2, 2],
    [0, 0, 0],
    [3, 1, 0],
]


class TestMaxVotes:
    def test_perfect_square(self):
        assert max_votes(16) == 4

    def test_rounds_down(self):
        assert max_votes(15) == 3

    def test_zero(self):
        assert max_votes(0) == 0

    def test_negative_rejected(self):
        with pytest.raises(MalformedInputError):
            max_votes(-1)


class TestReverseVoteMatrix:
    def test_rows_and_columns_reversed(self):
        assert reverse_vote_matrix(PERMUTED_VOTES, PERMUTATION) == TRUE_VOTES


class TestReconstructTurn:
    """Tests for reconstruct_turn()."""

    def reconstruct(self, **overrides):
        kwargs = dict(
            proposals=PERMUTED_PROPOSALS,
            votes=PERMUTED_VOTES,
            permutation=PERMUTATION,
            vote_credits=16,
            players=PLAYERS,
            block_timestamp=1700000000,
        )
        kwargs.update(overrides)
        return reconstruct_turn(**kwargs)

    def test_proposals_in_true_order(self):
        results = self.reconstruct()
        assert [r["proposal"] for r in results] == ["alice's idea", "bob's idea", "carol's idea"]
        assert [r["player"] for r in results] == PLAYERS

    def test_idle_voter_counts_as_max_votes(self):
        """Carol cast nothing; with 16 credits she gives 4 to everyone else."""
        alice, bob, carol = self.reconstruct()
        assert alice["score"] == 2 + 4
        assert bob["score"] == 3 + 4
        assert {"voter": CAROL, "score": 4} in alice["score_list"]
        assert {"voter": CAROL, "score": 4} in bob["score_list"]

    def test_active_voters_use_actual_votes(self):
        _, _, carol = self.reconstruct()
        assert carol["score"] == 1 + 2
        assert carol["score_list"] == [
            {"voter": ALICE, "score": 1},
            {"voter": BOB, "score": 2},
        ]

    def test_zero_contributions_dropped(self):
        votes = [
            [0, 3, 1],
            [0, 0, 2],
            [1, 1, 0],
        ]
        results = reconstruct_turn(["a", "b", "c"], votes, [0, 1, 2], 16, players=PLAYERS)
        alice = results[0]
        assert alice["score"] == 1
        assert alice["score_list"] == [{"voter": CAROL, "score": 1}]

    def test_empty_proposal_scores_nothing(self):
        """Bob submitted nothing: no score regardless of votes for his slot."""
        proposals = ["", "carol's idea", "alice's idea"]
        _, bob, _ = self.reconstruct(proposals=proposals)
        assert bob["proposal"] == ""
        assert bob["score"] == 0
        assert bob["score_list"] == []

    def test_block_timestamp_copied(self):
        results = self.reconstruct()
        assert all(r["block_timestamp"] == 1700000000 for r in results)

    def test_indices_without_players(self):
        results = self.reconstruct(players=None)
        assert [r["player"] for r in results] == [0, 1, 2]
        assert {"voter": 2, "score": 4} in results[0]["score_list"]

    def test_all_idle(self):
        results = reconstruct_turn(["a", "b"], [[0, 0], [0, 0]], [1, 0], 9)
        assert [r["score"] for r in results] == [3, 3]

    def test_voter_never_scores_own_proposal(self):
        votes = [
            [5, 0],
            [0, 5],
        ]
        results = reconstruct_turn(["a", "b"], votes, [0, 1], 25)
        assert [r["score"] for r in results] == [0, 0]


class TestReconstructTruncation:
    """Over-allocated payloads are cut to the permutation length first."""

    def test_long_proposal_list_truncated(self):
        proposals = PERMUTED_PROPOSALS + ["", ""]
        results = reconstruct_turn(proposals, PERMUTED_VOTES, PERMUTATION, 16, players=PLAYERS)
        assert len(results) == 3
        assert results[0]["proposal"] == "alice's idea"

    def test_over_allocated_matrix_truncated(self):
        votes = [row + [0, 0] for row in PERMUTED_VOTES] + [[0] * 5, [0] * 5]
        results = reconstruct_turn(PERMUTED_PROPOSALS, votes, PERMUTATION, 16, players=PLAYERS)
        assert [r["score"] for r in results] == [6, 7, 3]

    def test_short_proposal_list_rejected(self):
        with pytest.raises(MalformedInputError):
            reconstruct_turn(PERMUTED_PROPOSALS[:2], PERMUTED_VOTES, PERMUTATION, 16)

    def test_short_vote_row_rejected(self):
        votes = [[0, 2], [0, 0, 0], [3, 1, 0]]
        with pytest.raises(MalformedInputError):
            reconstruct_turn(PERMUTED_PROPOSALS, votes, PERMUTATION, 16)


class TestReconstructValidation:
    def test_players_length_mismatch(self):
        with pytest.raises(MalformedInputError) as exc:
            reconstruct_turn(PERMUTED_PROPOSALS, PERMUTED_VOTES, PERMUTATION, 16, players=PLAYERS[:2])
        assert exc.value.field == "players"

    def test_invalid_permutation(self):
        with pytest.raises(MalformedInputError):
            reconstruct_turn(PERMUTED_PROPOSALS, PERMUTED_VOTES, [0, 0, 1], 16)

    def test_negative_vote_cell(self):
        votes = [[0, -1, 2], [0, 0, 0], [3, 1, 0]]
        with pytest.raises(MalformedInputError):
            reconstruct_turn(PERMUTED_PROPOSALS, votes, PERMUTATION, 16)

    def test_negative_vote_credits(self):
        with pytest.raises(MalformedInputError):
            reconstruct_turn(PERMUTED_PROPOSALS, PERMUTED_VOTES, PERMUTATION, -4)
