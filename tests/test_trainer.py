import pytest

from intervalquiz.errors import EmptyActiveIds, EmptyKeys, InvalidCount, InvalidInput, UnknownInterval
from intervalquiz.trainer import generate_adaptive_session, generate_question, generate_session

IDS = ["root", "perfect_fourth", "perfect_fifth"]
KEYS = ["C", "G", "D", "A", "E"]


def test_generate_question_structure(rng):
	q = generate_question(IDS, KEYS, rng)
	assert q.interval_id in IDS
	assert q.key in KEYS
	assert q.root_hz > 0
	assert q.interval_hz >= q.root_hz


def test_root_interval_has_equal_frequencies(rng):
	for _ in range(10):
		q = generate_question(["root"], KEYS, rng)
		assert q.interval_hz == q.root_hz


def test_generate_question_empty_pools():
	with pytest.raises(EmptyActiveIds):
		generate_question([], KEYS)
	with pytest.raises(EmptyKeys):
		generate_question(IDS, [])


def test_generate_question_unknown_interval():
	with pytest.raises(UnknownInterval):
		generate_question(["augmented_ninth"], KEYS)


def test_generate_question_unknown_key():
	with pytest.raises(InvalidInput):
		generate_question(IDS, ["H"])


@pytest.mark.parametrize("count", [1, 5, 20])
def test_generate_session_length_and_membership(rng, count):
	qs = generate_session(IDS, KEYS, count, rng)
	assert len(qs) == count
	for q in qs:
		assert q.interval_id in IDS
		assert q.key in KEYS
		assert q.interval_hz >= q.root_hz


@pytest.mark.parametrize("count", [0, -3, 2.5, "5", True, None])
def test_generate_session_rejects_bad_count(count):
	with pytest.raises(InvalidCount):
		generate_session(IDS, KEYS, count)
	with pytest.raises(InvalidCount):
		generate_adaptive_session(IDS, KEYS, count, {})


def test_adaptive_session_length_and_membership(rng):
	qs = generate_adaptive_session(IDS, ["C"], 12, {"root": 0.9}, rng)
	assert len(qs) == 12
	assert all(q.interval_id in IDS and q.key == "C" for q in qs)


def test_adaptive_session_favours_weak_intervals(rng):
	stats = {"root": 1.0, "perfect_fifth": 0.1}
	qs = generate_adaptive_session(["root", "perfect_fifth"], KEYS, 600, stats, rng)
	fifths = sum(1 for q in qs if q.interval_id == "perfect_fifth")
	# expected share is 5/6
	assert fifths > 400


def test_adaptive_session_empty_ids():
	with pytest.raises(EmptyActiveIds):
		generate_adaptive_session([], KEYS, 3, {"root": 0.5})
