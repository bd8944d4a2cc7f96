from datetime import date, datetime, timedelta, timezone

from intervalquiz.streak import calculate_streak, to_utc_day

TODAY = date(2024, 3, 10)


def _iso(days_ago: int, hour: int = 12) -> str:
	d = TODAY - timedelta(days=days_ago)
	return datetime(d.year, d.month, d.day, hour, tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


def test_empty_history():
	assert calculate_streak([], today=TODAY) == 0


def test_today_only():
	assert calculate_streak([_iso(0)], today=TODAY) == 1


def test_yesterday_still_counts():
	assert calculate_streak([_iso(1)], today=TODAY) == 1


def test_two_days_ago_breaks_streak():
	assert calculate_streak([_iso(2)], today=TODAY) == 0


def test_consecutive_days():
	assert calculate_streak([_iso(0), _iso(1), _iso(2)], today=TODAY) == 3


def test_same_day_duplicates_collapse():
	assert calculate_streak([_iso(0, 8), _iso(0, 20), _iso(1)], today=TODAY) == 2


def test_gap_stops_count():
	dates = [_iso(0), _iso(1), _iso(3), _iso(4), _iso(5)]
	assert calculate_streak(dates, today=TODAY) == 2


def test_order_does_not_matter():
	assert calculate_streak([_iso(2), _iso(0), _iso(1)], today=TODAY) == 3


def test_utc_normalisation():
	# 23:30 at UTC-5 on the 9th is the 10th in UTC
	assert to_utc_day("2024-03-09T23:30:00-05:00") == date(2024, 3, 10)
	assert to_utc_day("2024-03-10T00:15:00.123Z") == date(2024, 3, 10)
	assert to_utc_day(datetime(2024, 3, 10, 5)) == date(2024, 3, 10)


def test_defaults_to_current_day():
	now = datetime.now(timezone.utc)
	assert calculate_streak([now.isoformat(), now - timedelta(days=1)]) == 2
