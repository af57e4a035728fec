"""Global constants and default settings."""

from pathlib import Path

WINDOW_WIDTH = 900
WINDOW_HEIGHT = 480
FPS = 60
WINDOW_TITLE = "NoteFlash"

# Full MIDI range
MIDI_NOTE_MIN = 0
MIDI_NOTE_MAX = 127

# Canonical playable range per clef (inclusive MIDI numbers)
TREBLE_RANGE = (60, 108)  # C4..C8
BASS_RANGE = (21, 60)  # A0..C4

# Middle staff line per clef
TREBLE_REFERENCE_MIDI = 71  # B4
BASS_REFERENCE_MIDI = 50  # D3

# Staff geometry (pixels)
STAFF_LINE_SPACING = 12.5
TREBLE_MIDDLE_LINE_Y = 160.0
BASS_MIDDLE_LINE_Y = 230.0
TREBLE_STAFF_CENTER_OFFSET = -4.7
BASS_STAFF_CENTER_OFFSET = 4.7
TREBLE_NOTE_CENTER_OFFSET = -0.2
BASS_NOTE_CENTER_OFFSET = 0.5

# Practice defaults
DEFAULT_NOTE_COUNT = 10
FEEDBACK_CLEAR_SECONDS = 0.8

DATA_DIR = Path.home() / ".noteflash"
