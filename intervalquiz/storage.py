from __future__ import annotations

import errno
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .config import config
from .errors import StorageError, StorageFull
from .logging_config import get_logger
from .models import AnswerResult, IntervalStat, SessionRecord, Settings

logger = get_logger(__name__)

_FULL_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


def newest_first(sessions: Iterable[SessionRecord]) -> List[SessionRecord]:
	"""Latest date first; sessions saved at the same instant by descending id."""
	return sorted(sessions, key=lambda s: (s.date, s.id), reverse=True)


def _data_path() -> Path:
	dir_ = config.data_dir
	dir_.mkdir(parents=True, exist_ok=True)
	return dir_ / "data.json"


class JsonStore:
	"""Sessions, per-interval stats and key-value settings in one JSON file.

	Layout on disk:
		{"sessions": [...], "next_session_id": n, "interval_stats": {id: {...}}, "settings": {key: value}}
	"""

	def __init__(self, path: Optional[Path] = None) -> None:
		self.path = path if path is not None else _data_path()

	def _load_raw(self) -> Dict[str, Any]:
		if not self.path.exists():
			return {}
		try:
			data = json.loads(self.path.read_text())
		except json.JSONDecodeError:
			logger.warning("Ignoring unreadable data file %s", self.path)
			return {}
		return data if isinstance(data, dict) else {}

	def _save_raw(self, data: Dict[str, Any]) -> None:
		tmp = self.path.with_suffix(".tmp")
		try:
			self.path.parent.mkdir(parents=True, exist_ok=True)
			tmp.write_text(json.dumps(data, indent=2))
			tmp.replace(self.path)
		except OSError as e:
			if e.errno in _FULL_ERRNOS:
				logger.warning("Storage full, could not write %s", self.path)
				raise StorageFull(str(e)) from e
			raise StorageError(f"could not write {self.path}: {e}") from e

	# sessions

	@staticmethod
	def _append_session(raw: Dict[str, Any], record: Mapping[str, Any]) -> SessionRecord:
		sessions = raw.setdefault("sessions", [])
		session_id = int(raw.get("next_session_id", len(sessions) + 1))
		stored = SessionRecord.model_validate({**record, "id": session_id})
		sessions.append(stored.model_dump(mode="json"))
		raw["next_session_id"] = session_id + 1
		return stored

	def save_session(self, record: Mapping[str, Any]) -> int:
		"""Append a session {date, score, total, interval_breakdown}; returns its id."""
		raw = self._load_raw()
		stored = self._append_session(raw, record)
		self._save_raw(raw)
		logger.debug("Saved session %d (%d/%d)", stored.id, stored.score, stored.total)
		return stored.id

	def record_session(
		self,
		record: Mapping[str, Any],
		results: Iterable[AnswerResult],
		settings: Optional[Mapping[str, Any]] = None,
	) -> int:
		"""Save a session, its per-interval results and any setting changes in a single write.

		Either everything lands on disk or nothing does.
		"""
		raw = self._load_raw()
		stored = self._append_session(raw, record)
		for r in results:
			self._bump_stat(raw, r.interval_id, r.correct)
		if settings:
			raw.setdefault("settings", {}).update(settings)
		self._save_raw(raw)
		logger.debug("Recorded session %d (%d/%d)", stored.id, stored.score, stored.total, extra={"session_id": stored.id})
		return stored.id

	def next_session_id(self) -> int:
		raw = self._load_raw()
		return int(raw.get("next_session_id", len(raw.get("sessions", [])) + 1))

	def _sessions(self) -> List[SessionRecord]:
		return [SessionRecord.model_validate(s) for s in self._load_raw().get("sessions", [])]

	def get_recent_sessions(self, n: int) -> List[SessionRecord]:
		return newest_first(self._sessions())[:n]

	def get_session_dates(self) -> List[str]:
		return [s.get("date") for s in self._load_raw().get("sessions", []) if s.get("date")]

	def get_session_count(self) -> int:
		return len(self._load_raw().get("sessions", []))

	def clear_sessions(self) -> None:
		raw = self._load_raw()
		raw["sessions"] = []
		self._save_raw(raw)

	# interval stats

	@staticmethod
	def _bump_stat(raw: Dict[str, Any], interval_id: str, was_correct: bool) -> IntervalStat:
		stats = raw.setdefault("interval_stats", {})
		prev = stats.get(interval_id) or {}
		stat = IntervalStat.from_counts(
			interval_id,
			int(prev.get("correct", 0)) + (1 if was_correct else 0),
			int(prev.get("total", 0)) + 1,
		)
		stats[interval_id] = stat.model_dump()
		return stat

	def update_interval_stat(self, interval_id: str, was_correct: bool) -> IntervalStat:
		raw = self._load_raw()
		stat = self._bump_stat(raw, interval_id, was_correct)
		self._save_raw(raw)
		return stat

	def get_all_interval_stats(self) -> List[IntervalStat]:
		return [IntervalStat.model_validate(v) for v in self._load_raw().get("interval_stats", {}).values()]

	def get_interval_stat(self, interval_id: str) -> Optional[IntervalStat]:
		obj = self._load_raw().get("interval_stats", {}).get(interval_id)
		return IntervalStat.model_validate(obj) if obj else None

	def clear_interval_stats(self) -> None:
		raw = self._load_raw()
		raw["interval_stats"] = {}
		self._save_raw(raw)

	# settings

	def save_setting(self, key: str, value: Any) -> None:
		raw = self._load_raw()
		raw.setdefault("settings", {})[key] = value
		self._save_raw(raw)

	def get_setting(self, key: str, default: Any = None) -> Any:
		settings = self._load_raw().get("settings", {})
		return settings[key] if key in settings else default

	def get_all_settings(self) -> Dict[str, Any]:
		obj = self._load_raw().get("settings", {})
		return dict(obj) if isinstance(obj, dict) else {}

	def load_settings(self) -> Settings:
		return Settings.model_validate(self.get_all_settings())

	def save_settings(self, s: Settings) -> None:
		raw = self._load_raw()
		raw.setdefault("settings", {}).update(s.model_dump(by_alias=True))
		self._save_raw(raw)
