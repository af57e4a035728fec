"""Performance analysis over attempt logs from one or many sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from noteflash.models import (
    Attempt,
    NoteKey,
    NotePerformance,
    PracticeStatistics,
    SessionRecord,
)


@dataclass(frozen=True)
class TargetResult:
    """All attempts made against one target identity within a session."""

    key: NoteKey
    attempts: tuple[Attempt, ...]  # oldest first

    @property
    def first_try_correct(self) -> bool:
        return self.attempts[0].is_correct

    @property
    def resolved(self) -> bool:
        """True if any attempt in the group was correct."""
        return any(a.is_correct for a in self.attempts)


def group_key(attempt: Attempt) -> NoteKey:
    return attempt.target.group_key


def group_attempts(attempts: Iterable[Attempt]) -> list[TargetResult]:
    """Group attempts by target identity, ordered by each group's first attempt.

    A target that appears twice in one session shares a single group, so
    its first-try result is decided by the earliest attempt only.
    """
    groups: dict[NoteKey, list[Attempt]] = {}
    for attempt in attempts:
        groups.setdefault(group_key(attempt), []).append(attempt)

    results = [
        TargetResult(key=key, attempts=tuple(sorted(group, key=lambda a: a.timestamp)))
        for key, group in groups.items()
    ]
    results.sort(key=lambda r: r.attempts[0].timestamp)
    return results


def first_try_correct_count(attempts: Iterable[Attempt]) -> int:
    """Number of targets whose earliest attempt was correct."""
    return sum(1 for r in group_attempts(attempts) if r.first_try_correct)


def multiple_attempts_count(attempts: Iterable[Attempt]) -> int:
    """Number of targets whose earliest attempt was wrong.

    This deliberately lumps together targets that were eventually played
    correctly and targets that never were (an abandoned session). Use
    :func:`unresolved_count` to tell the two apart.
    """
    return sum(1 for r in group_attempts(attempts) if not r.first_try_correct)


def unresolved_count(attempts: Iterable[Attempt]) -> int:
    """Number of targets with no correct attempt at all."""
    return sum(1 for r in group_attempts(attempts) if not r.resolved)


def cross_session_note_performance(
    sessions: Sequence[Sequence[Attempt]] | Sequence[SessionRecord],
) -> list[NotePerformance]:
    """Rank every target identity by first-try accuracy, worst first.

    Each session contributes at most one occurrence per target identity; the
    occurrence counts as correct when that session's earliest attempt for
    it was correct. Ties are broken by midi, then clef, then accidental.
    """
    correct: dict[NoteKey, int] = {}
    total: dict[NoteKey, int] = {}

    for session in sessions:
        attempts = session.attempts if isinstance(session, SessionRecord) else session
        for result in group_attempts(attempts):
            total[result.key] = total.get(result.key, 0) + 1
            if result.first_try_correct:
                correct[result.key] = correct.get(result.key, 0) + 1

    performances = [
        NotePerformance(
            key=key,
            correct_count=correct.get(key, 0),
            total_count=count,
            accuracy=correct.get(key, 0) / count,
        )
        for key, count in total.items()
    ]
    performances.sort(key=lambda p: (p.accuracy, p.midi, p.clef.value, p.accidental))
    return performances


def calculate_statistics(sessions: Sequence[SessionRecord]) -> PracticeStatistics:
    """Roll session-level counts up into overall practice statistics."""
    if not sessions:
        return PracticeStatistics()

    starts = [s.start for s in sessions]
    return PracticeStatistics(
        total_sessions=len(sessions),
        total_attempts=sum(s.total_attempts for s in sessions),
        total_first_try_correct=sum(s.first_try_correct for s in sessions),
        total_multiple_attempts=sum(s.multiple_attempts for s in sessions),
        average_session_duration=sum(s.duration for s in sessions) / len(sessions),
        most_recent_start=max(starts),
        oldest_start=min(starts),
    )
