import random
from collections import Counter

import pytest

from intervalquiz.errors import EmptyPool
from intervalquiz.models import IntervalStat
from intervalquiz.weighting import build_weighted_pool, get_weight, pick_from_pool


def test_weight_brackets():
	assert get_weight(None) == 3
	assert get_weight(0.0) == 5
	assert get_weight(0.49999) == 5
	assert get_weight(0.5) == 3
	assert get_weight(0.79999) == 3
	assert get_weight(0.8) == 1
	assert get_weight(1.0) == 1


def test_weight_is_always_one_of_three_values():
	for a in [x / 100 for x in range(0, 101)] + [None]:
		assert get_weight(a) in {1, 3, 5}


def test_pool_from_interval_stats():
	stats = [
		IntervalStat.from_counts("root", 9, 10),
		IntervalStat.from_counts("perfect_fifth", 1, 10),
	]
	pool = build_weighted_pool(["root", "perfect_fifth", "perfect_fourth"], stats)
	counts = Counter(pool)
	assert counts == {"root": 1, "perfect_fifth": 5, "perfect_fourth": 3}
	assert len(pool) == 9


def test_pool_from_accuracy_mapping():
	pool = build_weighted_pool(["root", "tritone"], {"root": 0.6, "tritone": None})
	assert Counter(pool) == {"root": 3, "tritone": 3}


def test_pool_length_is_sum_of_weights():
	ids = ["root", "perfect_fourth", "perfect_fifth", "tritone"]
	acc = {"root": 0.95, "perfect_fourth": 0.2, "tritone": 0.7}
	pool = build_weighted_pool(ids, acc)
	assert len(pool) == sum(get_weight(acc.get(i)) for i in ids)
	assert set(pool) <= set(ids)


def test_pool_ignores_stats_for_inactive_intervals():
	pool = build_weighted_pool(["root"], {"tritone": 0.1})
	assert pool == ["root", "root", "root"]


def test_empty_active_ids_give_empty_pool():
	assert build_weighted_pool([], {"root": 0.1}) == []
	assert build_weighted_pool([], None) == []


def test_pick_from_pool():
	rng = random.Random(7)
	pool = ["root", "root", "tritone"]
	for _ in range(20):
		assert pick_from_pool(pool, rng) in pool


def test_pick_from_empty_pool_fails():
	with pytest.raises(EmptyPool):
		pick_from_pool([])
