"""Lifecycle of a single practice session.

The run is an immutable SessionState. Each operation is a pure function
`(state, event) -> Transition` returning the next state plus the question whose
audio should be played, if any. QuizSession wraps those functions for hosts: it
holds the current state and the audio trigger, and plays audio only after the
new state is in place.

Phases: idle -> answering <-> feedback -> complete. A first wrong answer moves
to feedback and replays the question; resume() returns to answering for the one
retry. complete is terminal: a new run needs start().
"""
from __future__ import annotations

import random
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from .audio import AudioTrigger
from .catalog import get_interval
from .errors import InvalidTransition
from .logging_config import get_logger
from .models import AnswerResult, CompletionPayload, Interval, IntervalTally, Question, SessionState
from .trainer import generate_adaptive_session, generate_session
from .weighting import StatsInput

logger = get_logger(__name__)


class Transition(NamedTuple):
	state: SessionState
	play: Optional[Question] = None


def build_breakdown(results: Iterable[AnswerResult]) -> Dict[str, IntervalTally]:
	breakdown: Dict[str, IntervalTally] = {}
	for r in results:
		tally = breakdown.setdefault(r.interval_id, IntervalTally())
		tally.total += 1
		if r.correct:
			tally.correct += 1
	return breakdown


def current_question(state: SessionState) -> Optional[Question]:
	if 0 <= state.current_index < len(state.questions):
		return state.questions[state.current_index]
	return None


def answer_choices(interval_ids: Sequence[str]) -> List[Interval]:
	"""Catalog entries for the ids, lowest interval first. Unknown ids are dropped."""
	found = [get_interval(i) for i in interval_ids]
	return sorted((i for i in found if i is not None), key=lambda i: i.semitones)


def start_state(questions: Sequence[Question]) -> Transition:
	if not questions:
		raise InvalidTransition("a session needs at least one question")
	state = SessionState(questions=tuple(questions), phase="answering")
	return Transition(state, state.questions[0])


def _require(state: SessionState, *phases: str) -> None:
	if state.phase not in phases:
		raise InvalidTransition(f"not allowed while session is {state.phase!r}")


def _advance(state: SessionState, results: Sequence[AnswerResult]) -> Transition:
	next_index = state.current_index + 1
	if next_index >= len(state.questions):
		results = tuple(results)
		payload = CompletionPayload(
			questions=state.questions,
			results=results,
			score=sum(1 for r in results if r.correct),
			total=len(results),
			interval_breakdown=build_breakdown(results),
		)
		done = state.model_copy(update={
			"current_index": next_index,
			"phase": "complete",
			"selected_answer": None,
			"is_correct": None,
			"retry_used": False,
			"results": results,
			"completion": payload,
		})
		return Transition(done)

	nxt = state.model_copy(update={
		"current_index": next_index,
		"phase": "answering",
		"selected_answer": None,
		"is_correct": None,
		"retry_used": False,
		"results": tuple(results),
	})
	return Transition(nxt, nxt.questions[next_index])


def submit_answer(state: SessionState, answered_id: str) -> Transition:
	_require(state, "answering")
	question = state.questions[state.current_index]

	if answered_id == question.interval_id:
		result = AnswerResult(interval_id=question.interval_id, correct=True, used_retry=state.retry_used)
		return _advance(state, state.results + (result,))

	if not state.retry_used:
		retry = state.model_copy(update={
			"selected_answer": answered_id,
			"is_correct": False,
			"phase": "feedback",
			"retry_used": True,
		})
		return Transition(retry, question)

	result = AnswerResult(interval_id=question.interval_id, correct=False, used_retry=True)
	return _advance(state, state.results + (result,))


def resume(state: SessionState) -> Transition:
	"""Leave the feedback shown after a first wrong answer and wait for the retry."""
	_require(state, "feedback")
	return Transition(state.model_copy(update={"phase": "answering"}))


def advance_to_next(state: SessionState) -> Transition:
	"""Move on without a resolving answer; the current question counts as missed."""
	_require(state, "answering", "feedback")
	question = state.questions[state.current_index]
	missed = AnswerResult(interval_id=question.interval_id, correct=False, used_retry=state.retry_used)
	return _advance(state, state.results + (missed,))


def replay(state: SessionState) -> Transition:
	if state.phase == "idle":
		raise InvalidTransition("no session has been started")
	return Transition(state, current_question(state))


class QuizSession:
	"""Drives one run at a time for a host screen."""

	def __init__(self, audio: AudioTrigger, rng: Optional[random.Random] = None) -> None:
		self.audio = audio
		self.rng = rng
		self.state = SessionState()
		self.interval_ids: List[str] = []

	def _apply(self, t: Transition) -> None:
		self.state = t.state
		if t.play is not None:
			self.audio.play(t.play.root_hz, t.play.interval_hz)

	def start(
		self,
		interval_ids: Sequence[str],
		keys: Sequence[str],
		session_length: int,
		stats: Optional[StatsInput] = None,
	) -> None:
		if stats:
			questions = generate_adaptive_session(interval_ids, keys, session_length, stats, self.rng)
		else:
			questions = generate_session(interval_ids, keys, session_length, self.rng)
		self.interval_ids = list(interval_ids)
		logger.info("Session started: %d questions, adaptive=%s", len(questions), bool(stats))
		self._apply(start_state(questions))

	def submit_answer(self, answered_id: str) -> None:
		t = submit_answer(self.state, answered_id)
		if t.state.phase == "feedback":
			logger.debug("Wrong answer %r on question %d, retry granted", answered_id, t.state.current_index)
		self._apply(t)
		self._log_completion()

	def resume(self) -> None:
		self._apply(resume(self.state))

	def advance_to_next(self) -> None:
		self._apply(advance_to_next(self.state))
		self._log_completion()

	def play_current_question(self) -> None:
		self._apply(replay(self.state))

	def _log_completion(self) -> None:
		if self.state.completion is not None and self.state.phase == "complete":
			logger.info("Session complete: %d/%d", self.state.completion.score, self.state.completion.total)

	@property
	def phase(self) -> str:
		return self.state.phase

	@property
	def is_complete(self) -> bool:
		return self.state.phase == "complete"

	@property
	def completion(self) -> Optional[CompletionPayload]:
		return self.state.completion

	@property
	def current_question(self) -> Optional[Question]:
		return current_question(self.state)

	@property
	def answer_choices(self) -> List[Interval]:
		return answer_choices(self.interval_ids)
