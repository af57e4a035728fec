"""User settings: practice defaults and keyboard calibration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from noteflash.config import DATA_DIR, DEFAULT_NOTE_COUNT, MIDI_NOTE_MAX, MIDI_NOTE_MIN
from noteflash.models import ClefMode, PracticeSettings

logger = logging.getLogger(__name__)

SETTINGS_PATH = DATA_DIR / "settings.json"


@dataclass
class UserSettings:
    note_count: int = DEFAULT_NOTE_COUNT
    include_accidentals: bool = False
    clef_mode: str = "RANDOM"
    # Keyboard calibration, full MIDI range until calibrated
    min_midi_note: int = MIDI_NOTE_MIN
    max_midi_note: int = MIDI_NOTE_MAX

    def get_clef_mode(self) -> ClefMode:
        try:
            return ClefMode[self.clef_mode]
        except KeyError:
            return ClefMode.RANDOM

    @property
    def calibrated_range(self) -> tuple[int, int] | None:
        """The calibrated key range, or None when min > max."""
        if self.min_midi_note > self.max_midi_note:
            return None
        return (self.min_midi_note, self.max_midi_note)

    @property
    def keyboard_size(self) -> int | None:
        rng = self.calibrated_range
        if rng is None:
            return None
        return rng[1] - rng[0] + 1

    def clear_calibration(self) -> None:
        self.min_midi_note = MIDI_NOTE_MIN
        self.max_midi_note = MIDI_NOTE_MAX

    def practice_settings(self) -> PracticeSettings:
        return PracticeSettings(
            count=self.note_count,
            include_accidentals=self.include_accidentals,
            allowed_range=self.calibrated_range,
            clef_mode=self.get_clef_mode(),
        )


def load_settings(path: Path = SETTINGS_PATH) -> UserSettings:
    """Load settings from disk, returning defaults if absent or unreadable."""
    if not path.exists():
        return UserSettings()
    try:
        data = json.loads(path.read_text())
        practice = data.get("practice", {})
        return UserSettings(**{
            k: v for k, v in practice.items()
            if k in UserSettings.__dataclass_fields__
        })
    except (ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return UserSettings()


def save_settings(settings: UserSettings, path: Path = SETTINGS_PATH) -> None:
    """Persist settings to disk, keeping any other sections of the file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data: dict = {}
    if path.exists():
        try:
            data = json.loads(path.read_text())
        except ValueError:
            data = {}
    if not isinstance(data, dict):
        data = {}
    data["practice"] = asdict(settings)
    path.write_text(json.dumps(data, indent=2))
