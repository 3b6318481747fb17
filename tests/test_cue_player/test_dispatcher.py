"""Tests for CueDispatcher: routing, narration retry, missing audio."""

from __future__ import annotations

import logging

from cue_player.collaborators import NARRATION, TONES
from cue_player.dispatcher import CueDispatcher
from cue_player.exceptions import MissingAudioCapability, NarrationFailed
from ghosting_engine.models.enums import CueKind, SplitStepSpeed
from ghosting_engine.playback.index import SoundCue


def _announce(text: str = "Front Left", t: float = 4.0) -> SoundCue:
    return SoundCue(CueKind.ANNOUNCE, t, 0, text=text, voice="Karen", speech_rate=1.2)


class TestRouting:
    def test_narration_goes_to_narrator(self, narrator, tones) -> None:
        dispatcher = CueDispatcher(narrator, tones)
        assert dispatcher.dispatch(_announce())
        assert narrator.spoken == [("Front Left", "Karen", 1.2)]
        assert tones.played == []

    def test_tones_go_to_tone_player(self, narrator, tones) -> None:
        dispatcher = CueDispatcher(narrator, tones)
        split = SoundCue(CueKind.SPLIT_STEP, 4.5, 0, split_step_speed=SplitStepSpeed.FAST)
        beep = SoundCue(CueKind.BEEP, 5.0, 0)
        assert dispatcher.dispatch_all([split, beep]) == [split, beep]
        assert tones.played == [
            (CueKind.SPLIT_STEP, SplitStepSpeed.FAST),
            (CueKind.BEEP, SplitStepSpeed.NONE),
        ]
        assert narrator.spoken == []

    def test_completion_is_narrated(self, narrator, tones) -> None:
        CueDispatcher(narrator, tones).dispatch(
            SoundCue(CueKind.COMPLETION, 10.0, None, text="Workout complete")
        )
        assert narrator.spoken[0][0] == "Workout complete"


class TestNarrationRetry:
    def test_retried_once_then_played(self, make_narrator, tones) -> None:
        narrator = make_narrator(failures=1)
        dispatcher = CueDispatcher(narrator, tones, retries=1)
        assert dispatcher.dispatch(_announce())
        assert narrator.calls == 2
        assert narrator.spoken == [("Front Left", "Karen", 1.2)]

    def test_skipped_after_retry(self, make_narrator, tones, caplog) -> None:
        narrator = make_narrator(failures=5)
        dispatcher = CueDispatcher(narrator, tones, retries=1)
        with caplog.at_level(logging.WARNING):
            assert not dispatcher.dispatch(_announce())
        assert narrator.calls == 2
        assert dispatcher.skipped == [_announce()]
        assert "Skipping narration" in caplog.text
        assert dispatcher.audio_errors == []

    def test_next_cue_still_played(self, make_narrator, tones) -> None:
        narrator = make_narrator(failures=2)
        dispatcher = CueDispatcher(narrator, tones, retries=1)
        dispatcher.dispatch(_announce("A", 4.0))
        assert dispatcher.dispatch(_announce("B", 9.0))
        assert narrator.spoken[-1][0] == "B"

    def test_late_failure_signal(self, narrator, tones) -> None:
        dispatcher = CueDispatcher(narrator, tones, retries=1)
        cue = _announce()
        dispatcher.dispatch(cue)
        assert dispatcher.narration_failed(cue, NarrationFailed(cue.text))
        assert len(narrator.spoken) == 2
        assert not dispatcher.narration_failed(cue, NarrationFailed(cue.text))
        assert len(narrator.spoken) == 2
        assert dispatcher.skipped == [cue]

    def test_attempts_track_only_latest_narration(self, make_narrator, tones) -> None:
        dispatcher = CueDispatcher(make_narrator(), tones, retries=1)
        for n in range(20):
            dispatcher.dispatch(_announce(f"Cue {n}", float(n)))
        assert list(dispatcher._attempts) == [_announce("Cue 19", 19.0).key]

    def test_skipped_cue_is_forgotten(self, make_narrator, tones) -> None:
        dispatcher = CueDispatcher(make_narrator(failures=2), tones, retries=1)
        assert not dispatcher.dispatch(_announce())
        assert dispatcher._attempts == {}

    def test_no_retries(self, make_narrator, tones) -> None:
        narrator = make_narrator(failures=1)
        assert not CueDispatcher(narrator, tones, retries=0).dispatch(_announce())
        assert narrator.calls == 1


class TestMissingAudio:
    def test_missing_narrator_reported_once(self, tones, caplog) -> None:
        dispatcher = CueDispatcher(None, tones)
        with caplog.at_level(logging.WARNING):
            assert not dispatcher.dispatch(_announce("A", 4.0))
            assert not dispatcher.dispatch(_announce("B", 9.0))
        assert [e.capability for e in dispatcher.audio_errors] == [NARRATION]
        assert caplog.text.count("continuing without narration") == 1
        assert dispatcher.dispatch(SoundCue(CueKind.BEEP, 5.0, 0))

    def test_narrator_reports_missing_engine(self, make_narrator, tones) -> None:
        narrator = make_narrator(missing=True)
        dispatcher = CueDispatcher(narrator, tones)
        dispatcher.dispatch(_announce("A", 4.0))
        dispatcher.dispatch(_announce("B", 9.0))
        assert narrator.calls == 1
        assert len(dispatcher.audio_errors) == 1
        assert str(dispatcher.audio_errors[0]) == "No speech engine"
        assert not dispatcher.available(NARRATION)

    def test_missing_tones(self, narrator, make_tones) -> None:
        dispatcher = CueDispatcher(narrator, make_tones(MissingAudioCapability(TONES)))
        assert not dispatcher.dispatch(SoundCue(CueKind.BEEP, 5.0, 0))
        assert not dispatcher.dispatch(SoundCue(CueKind.BEEP, 10.0, 1))
        assert [e.capability for e in dispatcher.audio_errors] == [TONES]
        assert dispatcher.dispatch(_announce())

    def test_tone_error_is_not_missing_audio(self, narrator, make_tones, caplog) -> None:
        dispatcher = CueDispatcher(narrator, make_tones(RuntimeError("device busy")))
        with caplog.at_level(logging.WARNING):
            assert not dispatcher.dispatch(SoundCue(CueKind.BEEP, 5.0, 0))
        assert dispatcher.audio_errors == []
        assert "device busy" in caplog.text
        assert dispatcher.available(TONES)
