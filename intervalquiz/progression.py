from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from .catalog import get_interval, intervals_for_phase
from .models import Interval

# Accuracy a session needs to count toward unlocking the next phase
PHASE_MASTERY_THRESHOLD = 0.8
# Consecutive qualifying sessions needed
PHASE_MASTERY_SESSIONS = 3
MAX_PHASE = 10


class Scored(Protocol):
	score: int
	total: int


def session_accuracy(session: Scored) -> float:
	if not session.total:
		return 0.0
	return session.score / session.total


def check_phase_unlock(recent_sessions: Sequence[Scored], current_phase: int) -> Optional[int]:
	"""Return the phase to unlock, or None.

	`recent_sessions` must be newest first. Only the first
	PHASE_MASTERY_SESSIONS entries are looked at; all of them must reach
	PHASE_MASTERY_THRESHOLD.
	"""
	if current_phase >= MAX_PHASE:
		return None
	if len(recent_sessions) < PHASE_MASTERY_SESSIONS:
		return None
	window = recent_sessions[:PHASE_MASTERY_SESSIONS]
	if not all(session_accuracy(s) >= PHASE_MASTERY_THRESHOLD for s in window):
		return None
	return current_phase + 1


def active_intervals_for_phase(phase: int, custom_ids: Optional[Sequence[str]] = None) -> List[Interval]:
	"""Intervals to quiz on: the user's picks that the phase allows, else the whole phase."""
	phase_intervals = intervals_for_phase(phase)
	if custom_ids:
		valid = {i.id for i in phase_intervals}
		picked = [get_interval(i) for i in custom_ids if i in valid]
		filtered = [i for i in picked if i is not None]
		if filtered:
			return filtered
	return phase_intervals
