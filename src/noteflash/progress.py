"""Practice history persistence with SQLite."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from noteflash.config import DATA_DIR
from noteflash.models import (
    Attempt,
    Clef,
    ClefMode,
    NotePerformance,
    NoteTarget,
    Outcome,
    PracticeSettings,
    PracticeStatistics,
    SessionRecord,
)
from noteflash.stats import calculate_statistics, cross_session_note_performance

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = DATA_DIR / "progress.db"


class ProgressTracker:
    def __init__(self, db_path: Path = DEFAULT_DB_PATH) -> None:
        if str(db_path) != ":memory:":
            db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(db_path))
        self.conn.execute("PRAGMA foreign_keys = ON")
        self._init_db()

    def _init_db(self) -> None:
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                start_date TEXT NOT NULL,
                end_date TEXT NOT NULL,
                note_count INTEGER NOT NULL,
                include_accidentals INTEGER NOT NULL,
                range_start INTEGER,
                range_end INTEGER,
                clef_mode TEXT NOT NULL
            )
        """)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS attempts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id INTEGER NOT NULL REFERENCES sessions(id) ON DELETE CASCADE,
                target_midi INTEGER NOT NULL,
                target_clef TEXT NOT NULL,
                target_accidental TEXT NOT NULL,
                played_midi INTEGER NOT NULL,
                timestamp TEXT NOT NULL,
                outcome TEXT NOT NULL
            )
        """)
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_attempts_session ON attempts(session_id)"
        )
        self.conn.commit()

    def save_session(self, record: SessionRecord) -> int:
        """Store a completed session and its attempts; returns the new row id."""
        settings = record.settings
        range_start, range_end = settings.allowed_range or (None, None)
        with self.conn:
            cur = self.conn.execute(
                """INSERT INTO sessions
                   (start_date, end_date, note_count, include_accidentals,
                    range_start, range_end, clef_mode)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    record.start.isoformat(),
                    record.end.isoformat(),
                    settings.count,
                    int(settings.include_accidentals),
                    range_start,
                    range_end,
                    settings.clef_mode.value,
                ),
            )
            session_id = cur.lastrowid
            self.conn.executemany(
                """INSERT INTO attempts
                   (session_id, target_midi, target_clef, target_accidental,
                    played_midi, timestamp, outcome)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        session_id,
                        a.target.midi,
                        a.target.clef.value,
                        a.target.accidental,
                        a.played_midi,
                        a.timestamp.isoformat(),
                        a.outcome.value,
                    )
                    for a in record.attempts
                ],
            )
        record.id = session_id
        logger.info("Saved practice session %d with %d attempts", session_id, len(record.attempts))
        return session_id

    def fetch_all_sessions(self) -> list[SessionRecord]:
        """All sessions, most recent first."""
        cur = self.conn.execute("SELECT * FROM sessions ORDER BY start_date DESC, id DESC")
        return self._load(cur)

    def fetch_recent_sessions(self, limit: int = 10) -> list[SessionRecord]:
        cur = self.conn.execute(
            "SELECT * FROM sessions ORDER BY start_date DESC, id DESC LIMIT ?", (limit,)
        )
        return self._load(cur)

    def fetch_sessions(self, start: datetime, end: datetime) -> list[SessionRecord]:
        """Sessions that started within ``[start, end]``, most recent first."""
        cur = self.conn.execute(
            """SELECT * FROM sessions WHERE start_date >= ? AND start_date <= ?
               ORDER BY start_date DESC, id DESC""",
            (start.isoformat(), end.isoformat()),
        )
        return self._load(cur)

    def delete_session(self, session_id: int) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        logger.info("Deleted practice session %d", session_id)

    def delete_all_sessions(self) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM sessions")
        logger.info("Deleted all practice sessions")

    def get_overall_statistics(self) -> PracticeStatistics:
        return calculate_statistics(self.fetch_all_sessions())

    def get_statistics(self, start: datetime, end: datetime) -> PracticeStatistics:
        return calculate_statistics(self.fetch_sessions(start, end))

    def analyze_note_performance(self) -> list[NotePerformance]:
        """Per-note first-try accuracy across every stored session, worst first."""
        return cross_session_note_performance(self.fetch_all_sessions())

    def _load(self, cur: sqlite3.Cursor) -> list[SessionRecord]:
        cols = [d[0] for d in cur.description]
        rows = [dict(zip(cols, row)) for row in cur.fetchall()]
        return [self._record_from_row(row) for row in rows]

    def _record_from_row(self, row: dict) -> SessionRecord:
        allowed_range = None
        if row["range_start"] is not None and row["range_end"] is not None:
            allowed_range = (row["range_start"], row["range_end"])
        settings = PracticeSettings(
            count=row["note_count"],
            include_accidentals=bool(row["include_accidentals"]),
            allowed_range=allowed_range,
            clef_mode=ClefMode(row["clef_mode"]),
        )
        cur = self.conn.execute(
            """SELECT target_midi, target_clef, target_accidental, played_midi,
                      timestamp, outcome
               FROM attempts WHERE session_id = ? ORDER BY timestamp, id""",
            (row["id"],),
        )
        attempts = [
            Attempt(
                target=NoteTarget(midi=midi, clef=Clef(clef), accidental=accidental),
                played_midi=played,
                timestamp=datetime.fromisoformat(ts),
                outcome=Outcome(outcome),
            )
            for midi, clef, accidental, played, ts, outcome in cur.fetchall()
        ]
        return SessionRecord(
            start=datetime.fromisoformat(row["start_date"]),
            end=datetime.fromisoformat(row["end_date"]),
            settings=settings,
            attempts=attempts,
            id=row["id"],
        )

    def close(self) -> None:
        self.conn.close()
