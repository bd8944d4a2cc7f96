from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Union

Timestamp = Union[str, datetime]


def to_utc_day(ts: Timestamp) -> date:
	"""Calendar day (UTC) of an ISO-8601 string or datetime. Naive values count as UTC."""
	if isinstance(ts, str):
		ts = datetime.fromisoformat(ts.replace("Z", "+00:00"))
	if ts.tzinfo is None:
		return ts.date()
	return ts.astimezone(timezone.utc).date()


def calculate_streak(timestamps: Iterable[Timestamp], today: Optional[date] = None) -> int:
	"""Number of consecutive practice days ending today or yesterday."""
	days = sorted({to_utc_day(ts) for ts in timestamps}, reverse=True)
	if not days:
		return 0

	if today is None:
		today = datetime.now(timezone.utc).date()
	if days[0] not in (today, today - timedelta(days=1)):
		return 0

	streak = 1
	for prev, day in zip(days, days[1:]):
		if prev - day != timedelta(days=1):
			break
		streak += 1
	return streak
