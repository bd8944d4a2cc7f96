import io
from typing import Callable, Dict, NamedTuple, Optional, Protocol, Sequence, cast

import numpy as np
import numpy.typing as npt
import soundfile as sf

from .errors import InvalidInput
from .logging_config import get_logger
from .models import PlaybackMode, Waveform
from .theory import nearest_note

logger = get_logger(__name__)

SAMPLE_RATE = 44100
PLAYBACK_MODES = ("sequential", "sustained", "stacked")

Samples = npt.NDArray[np.float32]


class Envelope(NamedTuple):
	"""Linear fade-in and fade-out lengths, in seconds."""

	attack: float
	release: float


# Held notes fade out slowly so the interval rings; melodic notes stay short.
MODE_ENVELOPES: Dict[str, Envelope] = {
	"sequential": Envelope(attack=0.01, release=0.08),
	"sustained": Envelope(attack=0.03, release=0.40),
	"stacked": Envelope(attack=0.01, release=0.15),
}


class AudioTrigger(Protocol):
	"""Anything that can sound a question. Fire-and-forget."""

	def play(self, root_hz: float, interval_hz: float) -> None:
		...


def _check_mode(mode: str) -> None:
	if mode not in PLAYBACK_MODES:
		raise InvalidInput(f"Invalid mode {mode!r}. Must be one of: {', '.join(PLAYBACK_MODES)}")


def _samples(dur: float) -> int:
	return int(SAMPLE_RATE * dur)


def _oscillator(freq: float, n: int, waveform: str) -> Samples:
	cycles = freq * np.arange(n, dtype=np.float64) / SAMPLE_RATE
	if waveform == "sine":
		x = np.sin(2.0 * np.pi * cycles)
	elif waveform == "triangle":
		x = 4.0 * np.abs(cycles - np.floor(cycles + 0.5)) - 1.0
	elif waveform == "saw":
		x = 2.0 * (cycles - np.floor(cycles + 0.5))
	else:
		raise InvalidInput(f"Invalid waveform {waveform!r}")
	return x.astype(np.float32)


def _envelope(n: int, shape: Envelope) -> Samples:
	env = np.ones(n, dtype=np.float32)
	# Short notes get the fades scaled down so they never overlap.
	attack = min(_samples(shape.attack), n // 2)
	release = min(_samples(shape.release), n - attack)
	if attack:
		env[:attack] = np.linspace(0.0, 1.0, attack, endpoint=False, dtype=np.float32)
	if release:
		env[n - release:] = np.linspace(1.0, 0.0, release, dtype=np.float32)
	return env


def note(freq: float, dur: float, waveform: str = "sine", shape: Envelope = MODE_ENVELOPES["sequential"]) -> Samples:
	"""One enveloped note of `dur` seconds at `freq` Hz."""
	n = _samples(dur)
	return _oscillator(freq, n, waveform) * _envelope(n, shape)


def chord(freqs: Sequence[float], dur: float, waveform: str = "sine", shape: Envelope = MODE_ENVELOPES["sustained"]) -> Samples:
	"""Notes sounding together, scaled back to a peak of 1."""
	x = np.sum([note(f, dur, waveform, shape) for f in freqs], axis=0).astype(np.float32)
	peak = float(np.max(np.abs(x))) if x.size else 0.0
	return x / np.float32(peak) if peak > 0.0 else x


def _rest(dur: float) -> Samples:
	return np.zeros(_samples(dur), dtype=np.float32)


def render_interval(root_hz: float, interval_hz: float, mode: PlaybackMode = "sequential", waveform: Waveform = "sine") -> Samples:
	"""Render a question the way the chosen playback mode presents it.

	sequential: root then interval note, 1.5s each with a 0.5s gap.
	sustained: both notes held together for 3s.
	stacked: root, interval note, then both together for 2s.
	"""
	_check_mode(mode)
	shape = MODE_ENVELOPES[mode]
	if mode == "sequential":
		parts = [note(root_hz, 1.5, waveform, shape), _rest(0.5), note(interval_hz, 1.5, waveform, shape)]
	elif mode == "sustained":
		parts = [chord((root_hz, interval_hz), 3.0, waveform, shape)]
	else:
		parts = [
			note(root_hz, 1.0, waveform, shape),
			note(interval_hz, 1.0, waveform, shape),
			chord((root_hz, interval_hz), 2.0, waveform, MODE_ENVELOPES["sustained"]),
		]
	return np.concatenate(parts).astype(np.float32)


def to_wav(x: Samples, volume: float = 1.0) -> bytes:
	"""16-bit mono WAV of `x` scaled by `volume`."""
	buf = io.BytesIO()
	sf.write(buf, np.clip(x * np.float32(volume), -1.0, 1.0), SAMPLE_RATE, format="WAV", subtype="PCM_16")
	return buf.getvalue()


class SilentAudio:
	"""Text-only fallback when no audio output is available."""

	def play(self, root_hz: float, interval_hz: float) -> None:
		return None


class SynthAudio:
	"""Synthesises each question and hands the WAV bytes to `sink`."""

	def __init__(
		self,
		sink: Callable[[bytes], None],
		mode: PlaybackMode = "sequential",
		waveform: Waveform = "sine",
		volume: float = 0.9,
	) -> None:
		self.sink = sink
		self.waveform = waveform
		self.volume = volume
		self.mode: PlaybackMode = "sequential"
		self.set_mode(mode)
		self.last_wav: Optional[bytes] = None

	def set_mode(self, mode: str) -> None:
		_check_mode(mode)
		self.mode = cast(PlaybackMode, mode)

	def play(self, root_hz: float, interval_hz: float) -> None:
		self.last_wav = to_wav(render_interval(root_hz, interval_hz, self.mode, self.waveform), self.volume)
		logger.debug("Rendered %s-%s in %s mode", nearest_note(root_hz), nearest_note(interval_hz), self.mode)
		self.sink(self.last_wav)
