"""Static interval catalog.

Ids are used as storage keys and must never change. Each phase adds intervals
on top of every lower phase.
"""
from typing import Dict, List, Optional, Tuple

from .models import Interval


INTERVALS: Tuple[Interval, ...] = (
	Interval(id="root", name="Root", semitones=0, phase=1, display_name="Root (Unison)"),
	Interval(id="perfect_fourth", name="Perfect Fourth", semitones=5, phase=1, display_name="Perfect 4th"),
	Interval(id="perfect_fifth", name="Perfect Fifth", semitones=7, phase=1, display_name="Perfect 5th"),
	Interval(id="tritone", name="Tritone", semitones=6, phase=2, display_name="Tritone"),
	Interval(id="major_third", name="Major Third", semitones=4, phase=3, display_name="Major 3rd"),
	Interval(id="minor_third", name="Minor Third", semitones=3, phase=4, display_name="Minor 3rd"),
	Interval(id="major_sixth", name="Major Sixth", semitones=9, phase=5, display_name="Major 6th"),
	Interval(id="minor_sixth", name="Minor Sixth", semitones=8, phase=6, display_name="Minor 6th"),
	Interval(id="major_second", name="Major Second", semitones=2, phase=7, display_name="Major 2nd"),
	Interval(id="minor_second", name="Minor Second", semitones=1, phase=8, display_name="Minor 2nd"),
	Interval(id="major_seventh", name="Major Seventh", semitones=11, phase=9, display_name="Major 7th"),
	Interval(id="minor_seventh", name="Minor Seventh", semitones=10, phase=10, display_name="Minor 7th"),
)

KEYS: Tuple[str, ...] = ("C", "G", "D", "A", "E")

_BY_ID: Dict[str, Interval] = {i.id: i for i in INTERVALS}


def get_interval(interval_id: str) -> Optional[Interval]:
	return _BY_ID.get(interval_id)


def intervals_for_phase(phase: int) -> List[Interval]:
	return [i for i in INTERVALS if i.phase <= phase]


def interval_ids() -> List[str]:
	return [i.id for i in INTERVALS]
