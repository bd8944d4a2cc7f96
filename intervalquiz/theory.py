import math
from typing import Dict

from .errors import InvalidInput, InvalidOffset, UnknownKey

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

A4_MIDI = 69
A4_FREQ = 440.0

ROOT_OCTAVE = 4

# Lowest and highest notes nearest_note() will name (C1..B6)
MIDI_LOW = 24
MIDI_HIGH = 95


def midi_to_freq(m: int) -> float:
	return float(A4_FREQ * (2.0 ** ((m - A4_MIDI) / 12.0)))


def midi_to_name(m: int) -> str:
	return f"{NOTE_NAMES[m % 12]}{m // 12 - 1}"


# C3..B4, the octaves a quiz root can be drawn from
NOTE_FREQUENCIES: Dict[str, float] = {midi_to_name(m): midi_to_freq(m) for m in range(48, 72)}


def root_frequency(key_name: str) -> float:
	"""Frequency in Hz of a key such as 'C' or 'G#' played in octave 4."""
	freq = NOTE_FREQUENCIES.get(f"{key_name}{ROOT_OCTAVE}")
	if freq is None:
		raise UnknownKey(f"Unknown key: {key_name!r}. Expected a note name like 'C', 'A', 'G#'.")
	return freq


def interval_frequency(root_hz: float, semitones: int) -> float:
	"""Frequency `semitones` above `root_hz` in equal temperament."""
	if semitones < 0:
		raise InvalidOffset(f"semitones must be >= 0, got {semitones}")
	return float(root_hz * (2.0 ** (semitones / 12.0)))


def nearest_note(hz: float) -> str:
	"""Name of the equal-tempered note closest to `hz`, e.g. 261.63 -> 'C4'."""
	if hz <= 0:
		raise InvalidInput(f"Invalid frequency: {hz}")
	m = int(round(A4_MIDI + 12.0 * math.log2(hz / A4_FREQ)))
	m = max(MIDI_LOW, min(MIDI_HIGH, m))
	return midi_to_name(m)
