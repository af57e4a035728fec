"""Staff layout: MIDI pitch and clef to staff step, y position and ledger lines.

Every function here is a pure function of its arguments, so the live drill
screen and any results thumbnail place the same note at the same pixel.
"""

from __future__ import annotations

from dataclasses import dataclass

import pygame

from noteflash.config import (
    BASS_MIDDLE_LINE_Y,
    BASS_NOTE_CENTER_OFFSET,
    BASS_REFERENCE_MIDI,
    BASS_STAFF_CENTER_OFFSET,
    STAFF_LINE_SPACING,
    TREBLE_MIDDLE_LINE_Y,
    TREBLE_NOTE_CENTER_OFFSET,
    TREBLE_REFERENCE_MIDI,
    TREBLE_STAFF_CENTER_OFFSET,
)
from noteflash.models import Clef, NoteTarget
from noteflash.renderer.colors import LEDGER, NOTE_TARGET, NOTE_WRONG, STAFF_LINE, STAFF_TEXT

# C D E F G A B diatonic offsets from C within octave
_DIATONIC_OFFSETS = {0: 0, 2: 1, 4: 2, 5: 3, 7: 4, 9: 5, 11: 6}

# Staff lines sit on steps -4, -2, 0, 2, 4 around the middle line
STAFF_LINE_STEPS = (-4, -2, 0, 2, 4)
_STAFF_HALF_HEIGHT = 4


@dataclass(frozen=True)
class StaffMetrics:
    middle_line_y: float  # visual y of the middle staff line
    line_spacing: float  # distance between adjacent staff lines
    staff_center_offset: float = 0.0
    note_center_offset: float = 0.0  # puts the line through the note head centre

    @property
    def half_spacing(self) -> float:
        return self.line_spacing / 2.0

    def line_y(self, step: int) -> float:
        return (self.middle_line_y + self.staff_center_offset) - step * self.half_spacing


_METRICS = {
    Clef.TREBLE: StaffMetrics(
        middle_line_y=TREBLE_MIDDLE_LINE_Y,
        line_spacing=STAFF_LINE_SPACING,
        staff_center_offset=TREBLE_STAFF_CENTER_OFFSET,
        note_center_offset=TREBLE_NOTE_CENTER_OFFSET,
    ),
    Clef.BASS: StaffMetrics(
        middle_line_y=BASS_MIDDLE_LINE_Y,
        line_spacing=STAFF_LINE_SPACING,
        staff_center_offset=BASS_STAFF_CENTER_OFFSET,
        note_center_offset=BASS_NOTE_CENTER_OFFSET,
    ),
}

_REFERENCE_MIDI = {
    Clef.TREBLE: TREBLE_REFERENCE_MIDI,
    Clef.BASS: BASS_REFERENCE_MIDI,
}


def metrics(clef: Clef) -> StaffMetrics:
    return _METRICS[clef]


def reference_note(clef: Clef) -> int:
    """MIDI pitch of the clef's middle staff line (B4 treble, D3 bass)."""
    return _REFERENCE_MIDI[clef]


def diatonic_index(midi: int) -> int:
    """Index of a pitch on the white-key ladder, seven steps per octave.

    C-1 = -7, D-1 = -6, ... C4 = 28, B4 = 34, C5 = 35. A sharp or flat pitch
    takes the index of the natural a semitone below it (C#4 sits on the C4
    line).
    """
    octave = midi // 12 - 1
    note_in_octave = midi % 12
    if note_in_octave not in _DIATONIC_OFFSETS:
        note_in_octave -= 1
    return octave * 7 + _DIATONIC_OFFSETS[note_in_octave]


def staff_step(midi: int, clef: Clef) -> int:
    """Signed distance from the middle line in half-line-spacing units."""
    return diatonic_index(midi) - diatonic_index(reference_note(clef))


def y(midi: int, clef: Clef) -> float:
    return metrics(clef).line_y(staff_step(midi, clef))


def note_y(midi: int, clef: Clef) -> float:
    """Y of the note head centre."""
    return y(midi, clef) + metrics(clef).note_center_offset


def staff_line_ys(clef: Clef) -> list[float]:
    m = metrics(clef)
    return [m.line_y(step) for step in STAFF_LINE_STEPS]


def ledger_line_steps(step: int) -> list[int]:
    """Even steps that need a ledger line for a note at ``step``.

    Lines start one line-step past the staff (+/-6) and run through the
    note's own step when it is even. An odd (space) step only gets the
    lines between it and the staff.
    """
    if step > _STAFF_HALF_HEIGHT:
        return list(range(6, step + 1, 2))
    if step < -_STAFF_HALF_HEIGHT:
        return list(range(-6, step - 1, -2))
    return []


def ledger_lines(midi: int, clef: Clef) -> list[float]:
    """Y positions of ledger lines for a note, ordered outward from the staff."""
    m = metrics(clef)
    return [
        m.line_y(t) + m.note_center_offset
        for t in ledger_line_steps(staff_step(midi, clef))
    ]


def render_staff(
    surface: pygame.Surface,
    target: NoteTarget,
    x: int = 0,
    y_offset: int = 0,
    width: int = 300,
    wrong_midis: list[int] | None = None,
    note_color: tuple[int, int, int] = NOTE_TARGET,
) -> None:
    """Draw one clef's staff with the target note and any wrong guesses.

    Args:
        surface: Target surface.
        target: The note to draw; its clef picks the staff.
        x, y_offset: Where the staff's coordinate origin sits on the surface.
        width: Horizontal extent of the staff lines.
        wrong_midis: Played pitches to draw beside the target in red.
        note_color: Colour of the target note head.
    """
    clef = target.clef
    m = metrics(clef)
    head_rx = int(m.line_spacing * 0.75)
    head_ry = int(m.line_spacing / 2)

    for ly in staff_line_ys(clef):
        pygame.draw.line(surface, STAFF_LINE, (x, y_offset + ly), (x + width, y_offset + ly))

    font = pygame.font.SysFont("monospace", 14)
    label = font.render(clef.value.capitalize(), True, STAFF_TEXT)
    surface.blit(label, (x + 4, y_offset + m.line_y(4) - 20))

    def draw_note(midi: int, note_x: int, color: tuple[int, int, int], accidental: str) -> None:
        for ly in ledger_lines(midi, clef):
            pygame.draw.line(
                surface, LEDGER,
                (note_x - head_rx * 2, y_offset + ly), (note_x + head_rx * 2, y_offset + ly), 2,
            )
        ny = y_offset + note_y(midi, clef)
        rect = pygame.Rect(note_x - head_rx, int(ny) - head_ry, head_rx * 2, head_ry * 2)
        pygame.draw.ellipse(surface, color, rect, 2)
        if accidental:
            acc = font.render(accidental, True, color)
            surface.blit(acc, (note_x - head_rx - 14, int(ny) - 8))

    note_x = x + width // 2
    draw_note(target.midi, note_x, note_color, target.accidental)

    for i, midi in enumerate(wrong_midis or []):
        wrong_accidental = "" if midi % 12 in _DIATONIC_OFFSETS else "♯"
        draw_note(midi, note_x + (i + 1) * head_rx * 4, NOTE_WRONG, wrong_accidental)
