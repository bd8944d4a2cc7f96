import random
from typing import List, Tuple

import pytest

from intervalquiz.storage import JsonStore


class RecordingAudio:
	def __init__(self) -> None:
		self.calls: List[Tuple[float, float]] = []

	def play(self, root_hz: float, interval_hz: float) -> None:
		self.calls.append((root_hz, interval_hz))


@pytest.fixture
def audio() -> RecordingAudio:
	return RecordingAudio()


@pytest.fixture
def rng() -> random.Random:
	return random.Random(1234)


@pytest.fixture
def store(tmp_path) -> JsonStore:
	return JsonStore(tmp_path / "data.json")
