import math

import pytest

from intervalquiz.errors import InvalidInput, InvalidOffset, UnknownKey
from intervalquiz.theory import A4_FREQ, A4_MIDI, NOTE_FREQUENCIES, interval_frequency, midi_to_freq, nearest_note, root_frequency


def test_midi_to_freq_a4():
	assert midi_to_freq(A4_MIDI) == A4_FREQ


def test_note_table_covers_two_octaves():
	assert len(NOTE_FREQUENCIES) == 24
	assert math.isclose(NOTE_FREQUENCIES["A3"], 220.0)
	assert "C3" in NOTE_FREQUENCIES and "B4" in NOTE_FREQUENCIES


def test_root_frequency_octave_four():
	assert root_frequency("A") == 440.0
	assert math.isclose(root_frequency("C"), 261.6256, rel_tol=1e-5)
	assert math.isclose(root_frequency("G#"), 415.3047, rel_tol=1e-5)


def test_root_frequency_unknown_key():
	with pytest.raises(UnknownKey):
		root_frequency("H")
	with pytest.raises(InvalidInput):
		root_frequency("Cb")


def test_interval_frequency():
	root = root_frequency("C")
	assert interval_frequency(root, 0) == root
	assert math.isclose(interval_frequency(root, 12), 2 * root)
	assert math.isclose(interval_frequency(440.0, 7), 659.2551, rel_tol=1e-5)


def test_interval_frequency_rejects_negative_offset():
	with pytest.raises(InvalidOffset):
		interval_frequency(440.0, -1)


def test_nearest_note():
	assert nearest_note(440.0) == "A4"
	assert nearest_note(261.63) == "C4"
	assert nearest_note(270.0) == "C#4"
	# clamped to the lowest named note
	assert nearest_note(10.0) == "C1"
	with pytest.raises(InvalidInput):
		nearest_note(0)
