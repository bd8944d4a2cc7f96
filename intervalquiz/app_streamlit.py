import streamlit as st
import pandas as pd
import altair as alt
from typing import Any, List

from intervalquiz.audio import SynthAudio
from intervalquiz.catalog import get_interval, intervals_for_phase
from intervalquiz.logging_config import setup_logging
from intervalquiz.models import PlaybackMode, Settings, Waveform
from intervalquiz.practice import (
	clear_history_and_save,
	finish_session,
	load_analytics,
	load_home_summary,
	reset_progress,
	start_practice,
)
from intervalquiz.storage import JsonStore


st.set_page_config(page_title="Interval Trainer", page_icon=None, layout="centered")


def get_state() -> Any:
	if "store" not in st.session_state:
		setup_logging()
		st.session_state.store = JsonStore()
	if "settings" not in st.session_state:
		st.session_state.settings = st.session_state.store.load_settings()
	if "quiz" not in st.session_state:
		st.session_state.quiz = None
	if "pending_wav" not in st.session_state:
		st.session_state.pending_wav = None
	if "outcome" not in st.session_state:
		st.session_state.outcome = None
	if "view" not in st.session_state:
		st.session_state.view = "home"
	return st.session_state


def _queue_audio(wav: bytes) -> None:
	st.session_state.pending_wav = wav


def sidebar_controls(state: Any) -> Settings:
	s: Settings = state.settings
	st.sidebar.header("Settings")
	phase_ids: List[str] = [i.id for i in intervals_for_phase(s.current_phase)]
	picked = st.sidebar.multiselect(
		"Intervals",
		options=phase_ids,
		default=[i for i in s.active_interval_ids if i in phase_ids],
		format_func=lambda i: get_interval(i).display_name,
		help="Leave empty to practise every interval of your phase.",
	)
	modes = ["sequential", "sustained", "stacked"]
	mode_str = st.sidebar.selectbox("Playback", modes, index=modes.index(s.playback_mode))
	waveforms = ["sine", "triangle", "saw"]
	waveform_str = st.sidebar.selectbox("Waveform", waveforms, index=waveforms.index(s.waveform))
	session_len = st.sidebar.slider("Session length", min_value=1, max_value=50, value=s.session_length, step=1)
	volume = st.sidebar.slider("Volume", min_value=0.0, max_value=1.0, value=s.volume, step=0.05)

	mode: PlaybackMode = mode_str  # type: ignore[assignment]
	waveform: Waveform = waveform_str  # type: ignore[assignment]
	new_s = s.model_copy(update={
		"active_interval_ids": picked,
		"playback_mode": mode,
		"waveform": waveform,
		"session_length": session_len,
		"volume": volume,
	})
	if new_s != s:
		state.store.save_settings(new_s)

	if st.sidebar.button("Reset progress"):
		reset_progress(state.store)
		state.quiz = None
		state.outcome = None
		new_s = state.store.load_settings()
	return new_s


def home(state: Any) -> None:
	summary = load_home_summary(state.store)
	c1, c2, c3 = st.columns(3)
	c1.metric("Streak", f"{summary.streak} days")
	c2.metric("Sessions", summary.session_count)
	c3.metric("Phase", summary.current_phase)
	if st.button("My progress", use_container_width=True):
		state.view = "analytics"
		st.rerun()
	if st.button("Start session", use_container_width=True):
		s = state.settings
		audio = SynthAudio(_queue_audio, mode=s.playback_mode, waveform=s.waveform, volume=s.volume)
		state.quiz = start_practice(state.store, audio)
		state.outcome = None
		st.rerun()


def run_question(state: Any) -> None:
	quiz = state.quiz
	total = len(quiz.state.questions)
	st.progress(quiz.state.current_index / total, text=f"Question {quiz.state.current_index + 1} of {total}")

	if state.pending_wav is not None:
		st.audio(state.pending_wav, format="audio/wav", autoplay=True)
		state.pending_wav = None
	if st.button("Replay"):
		quiz.play_current_question()
		st.rerun()

	if quiz.phase == "feedback":
		wrong = get_interval(quiz.state.selected_answer or "")
		st.error(f"Try again! Not {wrong.display_name if wrong else quiz.state.selected_answer}.")
		c1, c2 = st.columns(2)
		if c1.button("Try again", use_container_width=True):
			quiz.resume()
			st.rerun()
		if c2.button("Give up", use_container_width=True):
			quiz.advance_to_next()
			st.rerun()
		return

	st.subheader("Which interval?")
	btn_cols = st.columns(2)
	for idx, interval in enumerate(quiz.answer_choices):
		with btn_cols[idx % 2]:
			if st.button(interval.display_name, key=f"opt-{interval.id}", use_container_width=True):
				quiz.submit_answer(interval.id)
				st.rerun()


def summary(state: Any) -> None:
	payload = state.quiz.completion
	if state.outcome is None:
		state.outcome = finish_session(state.store, payload)
		state.settings = state.store.load_settings()
	outcome = state.outcome

	st.success(f"Session complete: {payload.score} / {payload.total}")
	if not outcome.saved:
		st.warning("Storage is full. Clear old session history to keep saving progress.")
		if st.button("Clear history and save"):
			state.outcome = clear_history_and_save(state.store, payload)
			state.settings = state.store.load_settings()
			st.rerun()
	if outcome.unlocked_phase:
		st.balloons()
		st.info(f"Phase {outcome.unlocked_phase} unlocked!")
	st.write(f"Streak: {outcome.streak} days")

	rows = []
	for interval_id, tally in payload.interval_breakdown.items():
		interval = get_interval(interval_id)
		acc = tally.correct / tally.total if tally.total else 0.0
		rows.append({
			"interval": interval.display_name if interval else interval_id,
			"correct": tally.correct,
			"total": tally.total,
			"accuracy": round(acc, 3),
		})
	# Weakest first
	df = pd.DataFrame(rows).sort_values("accuracy")
	st.dataframe(df, hide_index=True)
	chart = alt.Chart(df).mark_bar().encode(
		x=alt.X("accuracy:Q", scale=alt.Scale(domain=[0, 1])),
		y=alt.Y("interval:N", sort=None),
		tooltip=["interval", "correct", "total", "accuracy"],
	).properties(width=400)
	st.altair_chart(chart, use_container_width=True)

	if st.button("Done", use_container_width=True):
		state.quiz = None
		state.outcome = None
		st.rerun()


def analytics(state: Any) -> None:
	data = load_analytics(state.store)
	st.header("My progress")
	if not data.sessions and not data.intervals:
		st.info("No sessions yet. Start your first session!")
	else:
		c1, c2, c3 = st.columns(3)
		c1.metric("Streak", f"{data.streak} days")
		c2.metric("Sessions", data.session_count)
		c3.metric("Accuracy", f"{data.overall_accuracy:.0%}")
		if data.focus is not None:
			st.warning(f"Focus area: {data.focus.display_name}. Try to sing it and relate it to a song.")

	if data.intervals:
		st.subheader("Interval accuracy")
		df = pd.DataFrame([r.model_dump(exclude={"interval_id"}) for r in data.intervals])
		df = df.rename(columns={"display_name": "interval"})
		st.dataframe(df, hide_index=True)
		bars = alt.Chart(df).mark_bar().encode(
			x=alt.X("accuracy:Q", scale=alt.Scale(domain=[0, 1])),
			y=alt.Y("interval:N", sort=None),
			tooltip=["interval", "correct", "total", "accuracy"],
		)
		st.altair_chart(bars, use_container_width=True)

	if data.sessions:
		st.subheader("Recent sessions")
		hist = pd.DataFrame([s.model_dump() for s in data.sessions])
		line = alt.Chart(hist).mark_line(point=True).encode(
			x=alt.X("date:T", title="date"),
			y=alt.Y("accuracy:Q", scale=alt.Scale(domain=[0, 1])),
			tooltip=["session_id", "score", "total", "accuracy"],
		)
		st.altair_chart(line, use_container_width=True)
		st.dataframe(hist.head(10), hide_index=True)

	if st.button("Back", use_container_width=True):
		state.view = "home"
		st.rerun()


def main() -> None:
	state = get_state()
	state.settings = sidebar_controls(state)

	st.title("Interval Ear Trainer")

	if state.quiz is None and state.view == "analytics":
		analytics(state)
	elif state.quiz is None:
		home(state)
	elif state.quiz.is_complete:
		summary(state)
	else:
		run_question(state)


if __name__ == "__main__":
	main()
