"""Tests for SQLite practice history."""

from datetime import datetime, timedelta

import pytest

from noteflash.models import Attempt, Clef, ClefMode, NoteTarget, Outcome, PracticeSettings, SessionRecord
from noteflash.progress import ProgressTracker

T0 = datetime(2025, 5, 10, 18, 30, 0)


def attempt(midi, played, seconds, clef=Clef.TREBLE):
    outcome = Outcome.CORRECT if midi == played else Outcome.INCORRECT
    return Attempt(
        target=NoteTarget(midi=midi, clef=clef),
        played_midi=played,
        timestamp=T0 + timedelta(seconds=seconds),
        outcome=outcome,
    )


def make_record(start=T0, attempts=None, settings=None):
    return SessionRecord(
        start=start,
        end=start + timedelta(minutes=5),
        settings=settings or PracticeSettings(count=2, clef_mode=ClefMode.TREBLE),
        attempts=attempts if attempts is not None else [attempt(60, 60, 1), attempt(62, 62, 2)],
    )


@pytest.fixture
def tracker(tmp_path):
    t = ProgressTracker(tmp_path / "progress.db")
    yield t
    t.close()


def test_save_and_fetch_round_trip(tracker):
    settings = PracticeSettings(count=3, include_accidentals=True, allowed_range=(48, 84),
                                clef_mode=ClefMode.RANDOM)
    attempts = [attempt(60, 60, 1), attempt(64, 62, 2), attempt(64, 64, 3, clef=Clef.BASS)]
    record = make_record(attempts=attempts, settings=settings)

    session_id = tracker.save_session(record)
    assert record.id == session_id

    [loaded] = tracker.fetch_all_sessions()
    assert loaded.id == session_id
    assert loaded.start == record.start
    assert loaded.end == record.end
    assert loaded.settings == settings
    assert loaded.attempts == attempts
    assert loaded.total_attempts == 3


def test_no_range_round_trips_as_none(tracker):
    tracker.save_session(make_record())
    [loaded] = tracker.fetch_all_sessions()
    assert loaded.settings.allowed_range is None


def test_sessions_newest_first_and_limit(tracker):
    for day in range(3):
        tracker.save_session(make_record(start=T0 + timedelta(days=day)))
    starts = [s.start for s in tracker.fetch_all_sessions()]
    assert starts == sorted(starts, reverse=True)
    recent = tracker.fetch_recent_sessions(limit=2)
    assert [s.start for s in recent] == starts[:2]


def test_fetch_sessions_by_date_range(tracker):
    for day in range(4):
        tracker.save_session(make_record(start=T0 + timedelta(days=day)))
    found = tracker.fetch_sessions(T0 + timedelta(days=1), T0 + timedelta(days=2))
    assert [s.start.day for s in found] == [12, 11]


def test_delete_session_removes_attempts(tracker):
    keep = tracker.save_session(make_record())
    drop = tracker.save_session(make_record(start=T0 + timedelta(hours=1)))
    tracker.delete_session(drop)
    assert [s.id for s in tracker.fetch_all_sessions()] == [keep]
    count = tracker.conn.execute("SELECT COUNT(*) FROM attempts").fetchone()[0]
    assert count == 2


def test_delete_all_sessions(tracker):
    tracker.save_session(make_record())
    tracker.save_session(make_record())
    tracker.delete_all_sessions()
    assert tracker.fetch_all_sessions() == []
    assert tracker.get_overall_statistics().total_sessions == 0


def test_analyze_note_performance(tracker):
    # C4 always right first time, D4 needs a retry
    tracker.save_session(make_record(attempts=[
        attempt(60, 60, 1),
        attempt(62, 60, 2),
        attempt(62, 62, 3),
        attempt(60, 60, 4),
    ]))
    performance = tracker.analyze_note_performance()
    assert len(performance) == 2
    assert performance[0].midi == 62
    assert performance[0].accuracy == 0.0
    assert performance[1].midi == 60
    assert performance[1].accuracy == 1.0


def test_statistics(tracker):
    tracker.save_session(make_record(attempts=[attempt(60, 61, 1), attempt(60, 60, 2)]))
    tracker.save_session(make_record(start=T0 + timedelta(days=2)))
    stats = tracker.get_overall_statistics()
    assert stats.total_sessions == 2
    assert stats.total_attempts == 4
    assert stats.total_first_try_correct == 2
    assert stats.total_multiple_attempts == 1
    assert stats.average_session_duration == pytest.approx(300.0)

    window = tracker.get_statistics(T0 + timedelta(days=1), T0 + timedelta(days=3))
    assert window.total_sessions == 1
