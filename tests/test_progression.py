from types import SimpleNamespace

from intervalquiz.progression import MAX_PHASE, active_intervals_for_phase, check_phase_unlock, session_accuracy


def _s(score, total):
	return SimpleNamespace(score=score, total=total)


def test_session_accuracy_handles_empty_session():
	assert session_accuracy(_s(0, 0)) == 0.0
	assert session_accuracy(_s(4, 5)) == 0.8


def test_unlock_needs_three_sessions():
	assert check_phase_unlock([], 1) is None
	assert check_phase_unlock([_s(5, 5), _s(5, 5)], 1) is None


def test_unlock_at_exactly_eighty_percent():
	assert check_phase_unlock([_s(4, 5)] * 3, 1) == 2
	assert check_phase_unlock([_s(4, 5)] * 3, 6) == 7


def test_no_unlock_when_one_session_is_weak():
	assert check_phase_unlock([_s(5, 5), _s(4, 5), _s(3, 5)], 2) is None


def test_zero_total_session_fails():
	assert check_phase_unlock([_s(5, 5), _s(0, 0), _s(5, 5)], 1) is None


def test_only_newest_three_sessions_count():
	older_mastered = [_s(5, 5)] * 5
	assert check_phase_unlock([_s(1, 5), _s(5, 5), _s(5, 5)] + older_mastered, 1) is None
	assert check_phase_unlock([_s(5, 5)] * 3 + [_s(0, 5)], 1) == 2


def test_no_unlock_past_max_phase():
	assert check_phase_unlock([_s(5, 5)] * 3, MAX_PHASE) is None
	assert check_phase_unlock([_s(5, 5)] * 3, 9) == 10


def test_active_intervals_default_to_phase():
	assert [i.id for i in active_intervals_for_phase(1)] == ["root", "perfect_fourth", "perfect_fifth"]
	assert active_intervals_for_phase(1, []) == active_intervals_for_phase(1)


def test_active_intervals_custom_selection_keeps_order():
	picked = active_intervals_for_phase(3, ["major_third", "root"])
	assert [i.id for i in picked] == ["major_third", "root"]


def test_active_intervals_drop_ids_above_phase():
	picked = active_intervals_for_phase(1, ["perfect_fifth", "tritone", "made_up"])
	assert [i.id for i in picked] == ["perfect_fifth"]


def test_active_intervals_fall_back_when_nothing_valid():
	assert active_intervals_for_phase(2, ["minor_seventh"]) == active_intervals_for_phase(2)
