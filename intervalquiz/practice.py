"""Glue between the engine and the stores, for whichever screen hosts a session.

Typical flow:
	session = start_practice(store, audio)
	... session.submit_answer(...) until session.is_complete ...
	outcome = finish_session(store, session.completion)
	if not outcome.saved:
		outcome = clear_history_and_save(store, session.completion)
"""
from __future__ import annotations

import random
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .audio import AudioTrigger
from .catalog import KEYS, get_interval
from .errors import StorageFull
from .logging_config import get_logger
from .models import CompletionPayload, IntervalStat, PlaybackMode, SessionRecord, Settings
from .progression import MAX_PHASE, PHASE_MASTERY_SESSIONS, active_intervals_for_phase, check_phase_unlock
from .session import QuizSession
from .storage import JsonStore, newest_first
from .streak import calculate_streak

logger = get_logger(__name__)

HISTORY_LIMIT = 30
FOCUS_THRESHOLD = 0.6


class SessionConfig(BaseModel):
	interval_ids: List[str]
	keys: List[str]
	session_length: int
	playback_mode: PlaybackMode
	stats: List[IntervalStat]


class SessionOutcome(BaseModel):
	saved: bool
	session_id: Optional[int] = None
	unlocked_phase: Optional[int] = None
	streak: int = 0


class HomeSummary(BaseModel):
	streak: int
	session_count: int
	current_phase: int


class IntervalAccuracy(BaseModel):
	interval_id: str
	display_name: str
	correct: int
	total: int
	accuracy: float


class SessionSummary(BaseModel):
	session_id: int
	date: datetime
	score: int
	total: int
	accuracy: float


class Analytics(BaseModel):
	streak: int
	session_count: int
	overall_accuracy: float
	intervals: List[IntervalAccuracy]
	sessions: List[SessionSummary]
	focus: Optional[IntervalAccuracy] = None


def load_session_config(store: JsonStore) -> SessionConfig:
	s = store.load_settings()
	active = active_intervals_for_phase(s.current_phase, s.active_interval_ids)
	return SessionConfig(
		interval_ids=[i.id for i in active],
		keys=list(KEYS),
		session_length=s.session_length,
		playback_mode=s.playback_mode,
		stats=store.get_all_interval_stats(),
	)


def start_practice(store: JsonStore, audio: AudioTrigger, rng: Optional[random.Random] = None) -> QuizSession:
	cfg = load_session_config(store)
	session = QuizSession(audio, rng=rng)
	session.start(cfg.interval_ids, cfg.keys, cfg.session_length, cfg.stats)
	return session


def finish_session(store: JsonStore, payload: CompletionPayload, now: Optional[datetime] = None) -> SessionOutcome:
	"""Persist a completed session, its per-interval stats and any phase unlock.

	The record, the stats and the unlock go to disk in one write. When the disk
	is full nothing is written and the outcome reports saved=False.
	"""
	if now is None:
		now = datetime.now(timezone.utc)
	pending = SessionRecord(
		id=store.next_session_id(),
		date=now,
		score=payload.score,
		total=payload.total,
		interval_breakdown=payload.interval_breakdown,
	)
	recent = newest_first([pending, *store.get_recent_sessions(PHASE_MASTERY_SESSIONS)])
	new_phase = check_phase_unlock(recent[:PHASE_MASTERY_SESSIONS], int(store.get_setting("currentPhase", 1)))
	changes: Dict[str, Any] = {}
	if new_phase is not None:
		changes = {f"phase{new_phase}Unlocked": True, "currentPhase": new_phase}

	try:
		session_id = store.record_session(pending.model_dump(exclude={"id"}), payload.results, changes)
	except StorageFull:
		logger.warning("Session not saved, storage is full")
		return SessionOutcome(saved=False)

	if new_phase is not None:
		logger.info("Phase %d unlocked", new_phase, extra={"phase": new_phase})
	return SessionOutcome(
		saved=True,
		session_id=session_id,
		unlocked_phase=new_phase,
		streak=calculate_streak(store.get_session_dates(), today=pending.date.astimezone(timezone.utc).date()),
	)


def clear_history_and_save(store: JsonStore, payload: CompletionPayload, now: Optional[datetime] = None) -> SessionOutcome:
	"""Drop the session history to free space, then save `payload` again.

	Interval stats and settings are kept.
	"""
	try:
		store.clear_sessions()
	except StorageFull:
		logger.warning("Could not clear session history, storage is full")
		return SessionOutcome(saved=False)
	logger.info("Session history cleared to free space")
	return finish_session(store, payload, now=now)


def load_home_summary(store: JsonStore, today: Optional[date] = None) -> HomeSummary:
	return HomeSummary(
		streak=calculate_streak(store.get_session_dates(), today=today),
		session_count=store.get_session_count(),
		current_phase=int(store.get_setting("currentPhase", 1)),
	)


def load_analytics(store: JsonStore, limit: int = HISTORY_LIMIT, today: Optional[date] = None) -> Analytics:
	"""All-time accuracy per interval (weakest first) and the latest `limit` sessions."""
	rows = []
	for stat in store.get_all_interval_stats():
		interval = get_interval(stat.interval_id)
		# stats for intervals no longer in the catalog are not shown
		if interval is None:
			continue
		rows.append(IntervalAccuracy(
			interval_id=stat.interval_id,
			display_name=interval.display_name,
			correct=stat.correct,
			total=stat.total,
			accuracy=stat.accuracy,
		))
	rows.sort(key=lambda r: r.accuracy)

	correct = sum(r.correct for r in rows)
	total = sum(r.total for r in rows)
	history = [
		SessionSummary(
			session_id=s.id,
			date=s.date,
			score=s.score,
			total=s.total,
			accuracy=s.score / s.total if s.total else 0.0,
		)
		for s in store.get_recent_sessions(limit)
	]
	weakest = rows[0] if rows else None
	return Analytics(
		streak=calculate_streak(store.get_session_dates(), today=today),
		session_count=store.get_session_count(),
		overall_accuracy=correct / total if total else 0.0,
		intervals=rows,
		sessions=history,
		focus=weakest if weakest is not None and weakest.accuracy < FOCUS_THRESHOLD else None,
	)


def reset_progress(store: JsonStore) -> None:
	"""Forget all sessions and stats and go back to phase 1 with default settings."""
	store.clear_sessions()
	store.clear_interval_stats()
	store.save_settings(Settings())
	for phase in range(2, MAX_PHASE + 1):
		store.save_setting(f"phase{phase}Unlocked", False)
	logger.info("Progress reset")
