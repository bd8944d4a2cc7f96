from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


PlaybackMode = Literal["sequential", "sustained", "stacked"]
Waveform = Literal["sine", "triangle", "saw"]
SessionPhase = Literal["idle", "answering", "feedback", "complete"]


class Interval(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str
	name: str
	semitones: int = Field(ge=0)
	phase: int = Field(ge=1)
	display_name: str


class Question(BaseModel):
	model_config = ConfigDict(frozen=True)

	key: str
	interval_id: str
	root_hz: float = Field(gt=0.0)
	interval_hz: float = Field(gt=0.0)

	@model_validator(mode="after")
	def check_interval_not_below_root(self) -> "Question":
		if self.interval_hz < self.root_hz:
			raise ValueError("interval_hz must not be below root_hz")
		return self


class AnswerResult(BaseModel):
	model_config = ConfigDict(frozen=True)

	interval_id: str
	correct: bool
	used_retry: bool


class IntervalTally(BaseModel):
	correct: int = Field(default=0, ge=0)
	total: int = Field(default=0, ge=0)


class CompletionPayload(BaseModel):
	model_config = ConfigDict(frozen=True)

	questions: Tuple[Question, ...]
	results: Tuple[AnswerResult, ...]
	score: int
	total: int
	interval_breakdown: Dict[str, IntervalTally]


class SessionState(BaseModel):
	"""Snapshot of one practice run. Transitions produce new snapshots."""

	model_config = ConfigDict(frozen=True)

	questions: Tuple[Question, ...] = ()
	current_index: int = 0
	phase: SessionPhase = "idle"
	selected_answer: Optional[str] = None
	is_correct: Optional[bool] = None
	retry_used: bool = False
	results: Tuple[AnswerResult, ...] = ()
	completion: Optional[CompletionPayload] = None


class IntervalStat(BaseModel):
	interval_id: str
	correct: int = Field(default=0, ge=0)
	total: int = Field(default=0, ge=0)
	accuracy: float = 0.0

	@classmethod
	def from_counts(cls, interval_id: str, correct: int, total: int) -> "IntervalStat":
		accuracy = correct / total if total > 0 else 0.0
		return cls(interval_id=interval_id, correct=correct, total=total, accuracy=accuracy)


class SessionRecord(BaseModel):
	id: int
	date: datetime
	score: int = Field(ge=0)
	total: int = Field(ge=0)
	interval_breakdown: Dict[str, IntervalTally] = Field(default_factory=dict)

	@field_validator("date")
	@classmethod
	def naive_dates_are_utc(cls, v: datetime) -> datetime:
		return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v


class Settings(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	playback_mode: PlaybackMode = Field(default="sequential", alias="playbackMode")
	session_length: int = Field(default=6, ge=1, le=200, alias="sessionLength")
	active_interval_ids: List[str] = Field(default_factory=list, alias="activeIntervalIds")
	current_phase: int = Field(default=1, ge=1, le=10, alias="currentPhase")
	waveform: Waveform = Field(default="sine")
	volume: float = Field(default=0.9, ge=0.0, le=1.0)

	@field_validator("active_interval_ids", mode="before")
	@classmethod
	def none_means_whole_phase(cls, v: object) -> object:
		return [] if v is None else v
