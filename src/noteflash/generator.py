"""Random target generation honoring clef range and keyboard calibration."""

from __future__ import annotations

import logging
import random
from typing import Any

from noteflash.config import BASS_RANGE, TREBLE_RANGE
from noteflash.models import (
    Clef,
    ClefMode,
    ConfigurationError,
    NoteTarget,
    PracticeSettings,
)

logger = logging.getLogger(__name__)

_NATURAL_PITCH_CLASSES = {0, 2, 4, 5, 7, 9, 11}

_CLEF_RANGES = {
    Clef.TREBLE: TREBLE_RANGE,
    Clef.BASS: BASS_RANGE,
}


def is_natural(midi: int) -> bool:
    return midi % 12 in _NATURAL_PITCH_CLASSES


def clef_range(clef: Clef) -> tuple[int, int]:
    """Canonical inclusive MIDI range for a clef."""
    return _CLEF_RANGES[clef]


def effective_range(
    clef: Clef, allowed_range: tuple[int, int] | None = None
) -> tuple[tuple[int, int], bool]:
    """Intersect the clef range with the calibrated range.

    Returns ``(range, fell_back)``. When the intersection is empty, or holds
    no natural pitch, the clef's full range is used and ``fell_back`` is True.
    """
    base = clef_range(clef)
    if allowed_range is None:
        return base, False
    lower = max(base[0], allowed_range[0])
    upper = min(base[1], allowed_range[1])
    if any(is_natural(midi) for midi in range(lower, upper + 1)):
        return (lower, upper), False
    return base, True


def random_note(
    clef: Clef,
    allowed_range: tuple[int, int] | None = None,
    rng: Any = None,
) -> int:
    """Pick a natural pitch uniformly from the effective range for ``clef``.

    ``rng`` is anything with a ``choice`` method (``random.Random(seed)`` in
    tests); the module-level ``random`` is used otherwise.
    """
    rng = rng or random
    (lower, upper), fell_back = effective_range(clef, allowed_range)
    if fell_back:
        logger.warning(
            "Allowed range %s has no natural notes in %s clef range; using %d-%d",
            allowed_range, clef.value, lower, upper,
        )
    candidates = [midi for midi in range(lower, upper + 1) if is_natural(midi)]
    if not candidates:
        raise ConfigurationError(
            f"No natural pitches between {lower} and {upper} for {clef.value} clef"
        )
    return rng.choice(candidates)


def choose_clef(mode: ClefMode, rng: Any = None) -> Clef:
    if mode == ClefMode.TREBLE:
        return Clef.TREBLE
    if mode == ClefMode.BASS:
        return Clef.BASS
    rng = rng or random
    return rng.choice((Clef.TREBLE, Clef.BASS))


def generate_targets(settings: PracticeSettings, rng: Any = None) -> list[NoteTarget]:
    """Build the full, ordered target list for a session.

    Only natural notes are produced, so every target's accidental is empty.
    """
    if settings.count <= 0:
        raise ConfigurationError(f"Session note count must be positive, got {settings.count}")
    targets: list[NoteTarget] = []
    for _ in range(settings.count):
        clef = choose_clef(settings.clef_mode, rng)
        midi = random_note(clef, settings.allowed_range, rng)
        targets.append(NoteTarget(midi=midi, clef=clef, accidental=""))
    return targets
