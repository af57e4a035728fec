"""Practice session — sequence targets and judge played notes against them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from noteflash.generator import generate_targets
from noteflash.models import (
    Attempt,
    ConfigurationError,
    NoteTarget,
    Outcome,
    PracticeSettings,
    SessionRecord,
    note_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptResult:
    """What happened to one played note.

    ``outcome`` and ``attempt`` are None when the note arrived after the
    session had already completed.
    """

    outcome: Outcome | None
    is_complete: bool
    attempt: Attempt | None = None


class PracticeSession:
    """Owns the target list and the append-only attempt log for one session.

    All targets are generated up front; the first one is current as soon as
    the session exists. A correct note advances to the next target, a wrong
    note is logged against the same target. Once every target has been hit
    the session is complete and further notes are ignored.

    Notes must be fed from a single consumer (the app's game loop): judging
    a note and advancing the index happen in one call.
    """

    def __init__(
        self,
        settings: PracticeSettings,
        rng: Any = None,
        clock: Callable[[], datetime] = datetime.now,
        targets: list[NoteTarget] | None = None,
        listener: Callable[[AttemptResult], None] | None = None,
    ) -> None:
        if settings.count <= 0:
            raise ConfigurationError(f"Session note count must be positive, got {settings.count}")
        if targets is None:
            targets = generate_targets(settings, rng)
        elif len(targets) != settings.count:
            raise ConfigurationError(
                f"Expected {settings.count} targets, got {len(targets)}"
            )
        self._settings = settings
        self._targets: tuple[NoteTarget, ...] = tuple(targets)
        self._attempts: list[Attempt] = []
        self._index = 0
        self._clock = clock
        self._listener = listener
        self._last_result: AttemptResult | None = None
        self.start_time = clock()
        logger.debug(
            "Session started with %d targets: %s",
            len(self._targets), ", ".join(t.name for t in self._targets),
        )

    @property
    def settings(self) -> PracticeSettings:
        return self._settings

    @property
    def targets(self) -> tuple[NoteTarget, ...]:
        return self._targets

    @property
    def count(self) -> int:
        return len(self._targets)

    @property
    def current_index(self) -> int:
        return self._index

    def is_complete(self) -> bool:
        return self._index >= len(self._targets)

    def current_target(self) -> NoteTarget | None:
        if self.is_complete():
            return None
        return self._targets[self._index]

    def attempts(self) -> tuple[Attempt, ...]:
        return tuple(self._attempts)

    def record_played_note(self, midi: int) -> AttemptResult:
        """Judge a note-on against the current target.

        The caller is expected to have dropped velocity-0 note-ons already.
        """
        target = self.current_target()
        if target is None:
            logger.debug("Ignoring note %d played after session completed", midi)
            return AttemptResult(outcome=None, is_complete=True)

        outcome = Outcome.CORRECT if midi == target.midi else Outcome.INCORRECT
        timestamp = self._clock()
        if self._attempts and timestamp < self._attempts[-1].timestamp:
            timestamp = self._attempts[-1].timestamp
        attempt = Attempt(target=target, played_midi=midi, timestamp=timestamp, outcome=outcome)
        self._attempts.append(attempt)

        if outcome == Outcome.CORRECT:
            self._index += 1
            if self.is_complete():
                logger.info("Session complete after %d attempts", len(self._attempts))

        result = AttemptResult(outcome=outcome, is_complete=self.is_complete(), attempt=attempt)
        self._last_result = result
        if self._listener is not None:
            self._listener(result)
        return result

    def feedback_message(self, show_correct: bool = True) -> str:
        """Status line for the drill screen, based on the last played note.

        The app passes ``show_correct=False`` once the "Correct!" flash has
        been on screen long enough.
        """
        if self.is_complete():
            return "Practice complete!"
        result = self._last_result
        if result is not None and result.attempt is not None:
            attempt = result.attempt
            if result.outcome == Outcome.INCORRECT:
                return (
                    f"Try again. You played {note_name(attempt.played_midi)}, "
                    f"but the target is {attempt.target.name}"
                )
            if show_correct:
                return f"Correct! {note_name(attempt.played_midi)}"
        return f"Play note {self._index + 1} of {self.count}"

    def last_result(self) -> AttemptResult | None:
        return self._last_result

    def to_record(self, end: datetime | None = None) -> SessionRecord:
        """Snapshot the session for the progress tracker."""
        return SessionRecord(
            start=self.start_time,
            end=end or self._clock(),
            settings=self._settings,
            attempts=list(self._attempts),
        )
