from __future__ import annotations

import random
from typing import List, Optional, Sequence

from .catalog import get_interval
from .errors import EmptyActiveIds, EmptyKeys, InvalidCount, UnknownInterval
from .models import Question
from .theory import interval_frequency, root_frequency
from .weighting import StatsInput, build_weighted_pool, pick_from_pool


def _check_pools(active_ids: Sequence[str], keys: Sequence[str]) -> None:
	if not active_ids:
		raise EmptyActiveIds("active_ids must not be empty")
	if not keys:
		raise EmptyKeys("keys must not be empty")


def _check_count(count: int) -> None:
	if isinstance(count, bool) or not isinstance(count, int) or count < 1:
		raise InvalidCount(f"count must be a positive integer, got {count!r}")


def build_question(key: str, interval_id: str) -> Question:
	interval = get_interval(interval_id)
	if interval is None:
		raise UnknownInterval(f"Unknown interval id: {interval_id!r}")
	root_hz = root_frequency(key)
	return Question(
		key=key,
		interval_id=interval_id,
		root_hz=root_hz,
		interval_hz=interval_frequency(root_hz, interval.semitones),
	)


def generate_question(active_ids: Sequence[str], keys: Sequence[str], rng: Optional[random.Random] = None) -> Question:
	"""Pick a key and an interval uniformly and resolve their frequencies."""
	_check_pools(active_ids, keys)
	r = rng or random
	key = r.choice(list(keys))
	return build_question(key, r.choice(list(active_ids)))


def generate_session(
	active_ids: Sequence[str],
	keys: Sequence[str],
	count: int,
	rng: Optional[random.Random] = None,
) -> List[Question]:
	_check_count(count)
	_check_pools(active_ids, keys)
	return [generate_question(active_ids, keys, rng) for _ in range(count)]


def generate_adaptive_session(
	active_ids: Sequence[str],
	keys: Sequence[str],
	count: int,
	stats: Optional[StatsInput],
	rng: Optional[random.Random] = None,
) -> List[Question]:
	"""Like generate_session, but intervals the learner struggles with come up more often.

	Keys are still drawn uniformly; only the interval choice is weighted.
	"""
	_check_count(count)
	_check_pools(active_ids, keys)
	r = rng or random
	pool = build_weighted_pool(active_ids, stats)
	keys = list(keys)
	questions = []
	for _ in range(count):
		interval_id = pick_from_pool(pool, rng)
		questions.append(build_question(r.choice(keys), interval_id))
	return questions
