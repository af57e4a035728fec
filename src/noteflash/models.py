"""Core data models shared across the trainer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NamedTuple

from noteflash.config import DEFAULT_NOTE_COUNT

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


def note_name(midi: int) -> str:
    """Scientific pitch name for a MIDI number, e.g. 60 -> "C4"."""
    if not 0 <= midi <= 127:
        return "—"
    return f"{NOTE_NAMES[midi % 12]}{midi // 12 - 1}"


class NoteFlashError(Exception):
    """Base class for errors raised by the trainer."""


class ConfigurationError(NoteFlashError, ValueError):
    """Raised when a practice session cannot be built from its settings."""


class Clef(Enum):
    TREBLE = "treble"
    BASS = "bass"


class ClefMode(Enum):
    TREBLE = "treble"
    BASS = "bass"
    RANDOM = "random"


class Outcome(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


class NoteKey(NamedTuple):
    """Identity of a practice target, used to group attempts."""

    midi: int
    clef: Clef
    accidental: str


@dataclass(frozen=True)
class NoteTarget:
    """A note shown on the staff that the player has to find."""

    midi: int  # MIDI note number 0-127
    clef: Clef
    accidental: str = ""  # display string: "", "♯" or "♭"

    @property
    def group_key(self) -> NoteKey:
        return NoteKey(self.midi, self.clef, self.accidental)

    @property
    def name(self) -> str:
        return note_name(self.midi)


@dataclass(frozen=True)
class Attempt:
    """One played note judged against the target that was showing."""

    target: NoteTarget
    played_midi: int
    timestamp: datetime
    outcome: Outcome

    @property
    def is_correct(self) -> bool:
        return self.outcome == Outcome.CORRECT


@dataclass
class PracticeSettings:
    """Parameters for a single practice session."""

    count: int = DEFAULT_NOTE_COUNT
    include_accidentals: bool = False
    allowed_range: tuple[int, int] | None = None  # inclusive, from calibration
    clef_mode: ClefMode = ClefMode.RANDOM


@dataclass
class SessionRecord:
    """A completed session as stored by the progress tracker."""

    start: datetime
    end: datetime
    settings: PracticeSettings
    attempts: list[Attempt] = field(default_factory=list)
    id: int | None = None

    @property
    def duration(self) -> float:
        return (self.end - self.start).total_seconds()

    @property
    def total_attempts(self) -> int:
        return len(self.attempts)

    @property
    def first_try_correct(self) -> int:
        from noteflash.stats import first_try_correct_count

        return first_try_correct_count(self.attempts)

    @property
    def multiple_attempts(self) -> int:
        from noteflash.stats import multiple_attempts_count

        return multiple_attempts_count(self.attempts)


@dataclass(frozen=True)
class NotePerformance:
    """Historical first-try accuracy for one target identity."""

    key: NoteKey
    correct_count: int
    total_count: int
    accuracy: float

    @property
    def midi(self) -> int:
        return self.key.midi

    @property
    def clef(self) -> Clef:
        return self.key.clef

    @property
    def accidental(self) -> str:
        return self.key.accidental

    @property
    def name(self) -> str:
        return note_name(self.key.midi)


@dataclass
class PracticeStatistics:
    total_sessions: int = 0
    total_attempts: int = 0
    total_first_try_correct: int = 0
    total_multiple_attempts: int = 0
    average_session_duration: float = 0.0  # seconds
    most_recent_start: datetime | None = None
    oldest_start: datetime | None = None

    @property
    def overall_accuracy(self) -> float:
        judged = self.total_first_try_correct + self.total_multiple_attempts
        if self.total_attempts == 0 or judged == 0:
            return 0.0
        return self.total_first_try_correct / judged
