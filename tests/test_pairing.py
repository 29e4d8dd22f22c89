"""
Tests for the seeded shuffle and the mate-call pair generator.
"""

import pytest

from checkmate.core.pairing import (
    NO_PARTICIPANT,
    Pair,
    SeededRandom,
    count_self_pairs,
    generate_pairs,
    generate_pairs_unresolved,
    resolve_self_pairs,
    seeded_shuffle,
)


class TestSeededRandom:

    def test_first_value_follows_the_lcg(self):
        rng = SeededRandom(1)
        assert rng.random() == pytest.approx((1 * 9301 + 49297) % 233280 / 233280)

    def test_values_stay_in_unit_interval(self):
        rng = SeededRandom(20240101)
        for _ in range(500):
            value = rng.random()
            assert 0 <= value < 1

    def test_negative_seed_is_accepted(self):
        assert 0 <= SeededRandom(-12345).random() < 1


class TestSeededShuffle:

    def test_golden_order(self):
        assert seeded_shuffle([0, 1, 2, 3, 4], 20240101) == [3, 2, 1, 4, 0]

    def test_refill_batch_order(self):
        assert seeded_shuffle([0, 1, 2, 3, 4], 20240101 + 541) == [3, 0, 4, 1, 2]

    @pytest.mark.parametrize("seed", [0, 1, 202401, 202452, 987654321])
    def test_result_is_a_permutation(self, seed):
        items = list(range(10))
        assert sorted(seeded_shuffle(items, seed)) == items

    def test_same_seed_same_order(self):
        items = ["a", "b", "c", "d", "e", "f"]
        assert seeded_shuffle(items, 42) == seeded_shuffle(items, 42)

    def test_input_is_not_modified(self):
        items = [1, 2, 3]
        seeded_shuffle(items, 7)
        assert items == [1, 2, 3]

    def test_empty_and_single(self):
        assert seeded_shuffle([], 5) == []
        assert seeded_shuffle(["x"], 5) == ["x"]


class TestGeneratePairs:

    def test_golden_pairs_for_five_participants(self):
        pairs = generate_pairs(4, 5, 20240101)
        assert pairs == [Pair(0, 2), Pair(3, 1), Pair(0, 4), Pair(4, 3)]

    def test_golden_pairs_cover_everyone_without_self_pairs(self):
        pairs = generate_pairs(4, 5, 20240101)
        covered = {p.caller_idx for p in pairs} | {p.partner_idx for p in pairs}
        assert covered == {0, 1, 2, 3, 4}
        assert count_self_pairs(pairs) == 0

    @pytest.mark.parametrize("pool_size", range(1, 9))
    def test_every_participant_appears(self, pool_size):
        for seed in (202401, 202402, 202415):
            pairs = generate_pairs(4, pool_size, seed)
            covered = {p.caller_idx for p in pairs} | {p.partner_idx for p in pairs}
            assert covered == set(range(pool_size))

    def test_deterministic(self):
        assert generate_pairs(4, 7, 202403) == generate_pairs(4, 7, 202403)

    def test_row_count_is_respected(self):
        assert len(generate_pairs(4, 10, 1)) == 4
        assert len(generate_pairs(6, 3, 1)) == 6

    @pytest.mark.parametrize("pool_size", range(2, 11))
    def test_resolution_never_adds_self_pairs(self, pool_size):
        for seed in range(202401, 202453):
            before = generate_pairs_unresolved(4, pool_size, seed)
            after = generate_pairs(4, pool_size, seed)
            assert count_self_pairs(after) <= count_self_pairs(before)

    def test_empty_pool_gives_unassigned_rows(self):
        pairs = generate_pairs(4, 0, 202401)
        assert pairs == [Pair(NO_PARTICIPANT, NO_PARTICIPANT)] * 4
        assert count_self_pairs(pairs) == 0

    def test_single_participant_is_left_alone(self):
        assert generate_pairs(4, 1, 202401) == [Pair(0, 0)] * 4


class TestResolveSelfPairs:

    def test_swaps_partner_with_next_row(self):
        pairs = [Pair(1, 1), Pair(2, 3)]
        assert resolve_self_pairs(pairs, 4) == [Pair(1, 3), Pair(2, 1)]

    def test_last_row_wraps_to_first(self):
        pairs = [Pair(0, 1), Pair(2, 2)]
        assert resolve_self_pairs(pairs, 4) == [Pair(0, 2), Pair(2, 1)]

    def test_pool_of_one_is_untouched(self):
        pairs = [Pair(0, 0), Pair(0, 0)]
        assert resolve_self_pairs(pairs, 1) == pairs

    def test_pair_serialization(self):
        assert Pair(3, 1).to_dict() == {"callerIdx": 3, "partnerIdx": 1}
        assert not Pair(NO_PARTICIPANT, NO_PARTICIPANT).is_self_pair
