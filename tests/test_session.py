"""Tests for the practice session state machine."""

import random
from datetime import datetime, timedelta

import pytest

from noteflash.models import Clef, ClefMode, ConfigurationError, NoteTarget, Outcome, PracticeSettings
from noteflash.session import PracticeSession


def make_clock(start=datetime(2025, 1, 1, 12, 0, 0)):
    now = [start]

    def clock():
        now[0] += timedelta(seconds=1)
        return now[0]

    return clock


def fixed_targets(*midis):
    return [NoteTarget(midi=m, clef=Clef.TREBLE) for m in midis]


def test_count_must_be_positive():
    with pytest.raises(ConfigurationError):
        PracticeSession(PracticeSettings(count=0))
    with pytest.raises(ConfigurationError):
        PracticeSession(PracticeSettings(count=-3))


def test_supplied_targets_must_match_count():
    with pytest.raises(ConfigurationError):
        PracticeSession(PracticeSettings(count=3), targets=fixed_targets(60, 62))


def test_calibration_without_naturals_still_builds_session():
    settings = PracticeSettings(count=3, clef_mode=ClefMode.TREBLE, allowed_range=(61, 61))
    session = PracticeSession(settings, rng=random.Random(0))
    assert len(session.targets) == 3
    assert all(60 <= t.midi <= 108 and t.accidental == "" for t in session.targets)


def test_targets_generated_up_front():
    settings = PracticeSettings(count=6, clef_mode=ClefMode.TREBLE)
    session = PracticeSession(settings, rng=random.Random(9))
    assert session.count == 6
    assert len(session.targets) == 6
    assert session.current_target() == session.targets[0]
    assert session.current_index == 0
    assert not session.is_complete()
    assert session.attempts() == ()


def test_all_correct_first_try_completes():
    session = PracticeSession(
        PracticeSettings(count=5), rng=random.Random(11), clock=make_clock()
    )
    for target in session.targets:
        result = session.record_played_note(target.midi)
        assert result.outcome == Outcome.CORRECT

    assert session.is_complete()
    assert result.is_complete
    assert len(session.attempts()) == 5
    assert all(a.outcome == Outcome.CORRECT for a in session.attempts())
    assert session.current_target() is None


def test_wrong_notes_hold_position_until_correct():
    session = PracticeSession(
        PracticeSettings(count=2), targets=fixed_targets(64, 67), clock=make_clock()
    )
    assert session.record_played_note(62).outcome == Outcome.INCORRECT
    assert session.current_index == 0
    assert session.record_played_note(65).outcome == Outcome.INCORRECT
    assert session.current_index == 0
    assert session.current_target().midi == 64

    result = session.record_played_note(64)
    assert result.outcome == Outcome.CORRECT
    assert not result.is_complete
    assert session.current_index == 1
    assert session.current_target().midi == 67

    attempts = session.attempts()
    assert [a.target.midi for a in attempts] == [64, 64, 64]
    assert [a.outcome for a in attempts] == [Outcome.INCORRECT, Outcome.INCORRECT, Outcome.CORRECT]


def test_outcome_compares_pitch_only():
    # Same pitch, target displayed in bass clef: still correct
    session = PracticeSession(
        PracticeSettings(count=1), targets=[NoteTarget(midi=60, clef=Clef.BASS)]
    )
    assert session.record_played_note(60).outcome == Outcome.CORRECT


def test_notes_after_completion_are_ignored():
    session = PracticeSession(PracticeSettings(count=1), targets=fixed_targets(60))
    session.record_played_note(60)
    assert session.is_complete()

    result = session.record_played_note(62)
    assert result.outcome is None
    assert result.attempt is None
    assert result.is_complete
    assert len(session.attempts()) == 1


def test_attempt_log_is_read_only_and_time_ordered():
    session = PracticeSession(
        PracticeSettings(count=2), targets=fixed_targets(60, 62), clock=make_clock()
    )
    for midi in (61, 60, 63, 62):
        session.record_played_note(midi)
    attempts = session.attempts()
    assert isinstance(attempts, tuple)
    stamps = [a.timestamp for a in attempts]
    assert stamps == sorted(stamps)
    assert attempts[0].played_midi == 61


def test_listener_receives_each_result():
    seen = []
    session = PracticeSession(
        PracticeSettings(count=1), targets=fixed_targets(60), listener=seen.append
    )
    session.record_played_note(59)
    session.record_played_note(60)
    session.record_played_note(60)  # late, not reported
    assert [r.outcome for r in seen] == [Outcome.INCORRECT, Outcome.CORRECT]


def test_feedback_messages():
    session = PracticeSession(PracticeSettings(count=2), targets=fixed_targets(60, 62))
    assert session.feedback_message() == "Play note 1 of 2"
    session.record_played_note(62)
    assert session.feedback_message() == "Try again. You played D4, but the target is C4"
    session.record_played_note(60)
    assert session.feedback_message() == "Correct! C4"
    assert session.feedback_message(show_correct=False) == "Play note 2 of 2"
    session.record_played_note(62)
    assert session.feedback_message() == "Practice complete!"


def test_to_record_snapshots_attempts():
    clock = make_clock()
    settings = PracticeSettings(count=1)
    session = PracticeSession(settings, targets=fixed_targets(60), clock=clock)
    session.record_played_note(61)
    session.record_played_note(60)

    record = session.to_record()
    assert record.settings is settings
    assert record.total_attempts == 2
    assert record.start == session.start_time
    assert record.end > record.start
    assert record.first_try_correct == 0
    assert record.multiple_attempts == 1
