from __future__ import annotations

import random
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .errors import EmptyPool
from .models import IntervalStat

# No stat yet: treat as needs work until we know more
WEIGHT_NO_DATA = 3
WEIGHT_STRUGGLING = 5
WEIGHT_NEEDS_WORK = 3
# Mastered intervals still show up, just less often
WEIGHT_STRONG = 1

StatsInput = Union[Mapping[str, Optional[float]], Iterable[IntervalStat]]


def get_weight(accuracy: Optional[float]) -> int:
	"""Sampling weight for an accuracy in [0, 1], or None when there is no data."""
	if accuracy is None:
		return WEIGHT_NO_DATA
	if accuracy < 0.5:
		return WEIGHT_STRUGGLING
	if accuracy < 0.8:
		return WEIGHT_NEEDS_WORK
	return WEIGHT_STRONG


def accuracy_map(stats: Optional[StatsInput]) -> Dict[str, Optional[float]]:
	if stats is None:
		return {}
	if isinstance(stats, Mapping):
		return dict(stats)
	return {s.interval_id: s.accuracy for s in stats}


def build_weighted_pool(active_ids: Sequence[str], stats: Optional[StatsInput]) -> List[str]:
	"""Repeat each active id `weight` times so a uniform pick is a weighted pick."""
	acc = accuracy_map(stats)
	pool: List[str] = []
	for interval_id in active_ids:
		pool.extend([interval_id] * get_weight(acc.get(interval_id)))
	return pool


def pick_from_pool(pool: Sequence[str], rng: Optional[random.Random] = None) -> str:
	if not pool:
		raise EmptyPool("pool must not be empty")
	return (rng or random).choice(pool)
