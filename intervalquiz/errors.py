from __future__ import annotations


class IntervalQuizError(Exception):
	"""Base class for every error raised by intervalquiz."""


class InvalidInput(IntervalQuizError, ValueError):
	"""A call was made with arguments the engine refuses to work with."""


class UnknownKey(InvalidInput):
	pass


class InvalidOffset(InvalidInput):
	pass


class UnknownInterval(InvalidInput):
	pass


class EmptyActiveIds(InvalidInput):
	pass


class EmptyKeys(InvalidInput):
	pass


class InvalidCount(InvalidInput):
	pass


class EmptyPool(IntervalQuizError, ValueError):
	"""The weighted pool has nothing to draw from (no active intervals upstream)."""


class InvalidTransition(IntervalQuizError, RuntimeError):
	"""A session operation was called in a phase that does not accept it."""


class StorageError(IntervalQuizError):
	pass


class StorageFull(StorageError):
	"""The data directory refused a write because the disk or quota is full."""
