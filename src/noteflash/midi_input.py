"""Note-on input from a connected MIDI keyboard or the computer keyboard."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterator, Protocol, Sequence, runtime_checkable

import mido
import pygame
import rtmidi

logger = logging.getLogger(__name__)


@dataclass
class LiveNoteEvent:
    pitch: int
    velocity: int
    timestamp: float
    is_note_on: bool


class MidiDeviceError(Exception):
    """Raised when no MIDI device is found or connection fails."""


@runtime_checkable
class InputSource(Protocol):
    """Common interface for MIDI and keyboard input sources."""
    def poll(self) -> LiveNoteEvent | None: ...
    def close(self) -> None: ...


def decode_message(data: Sequence[int], timestamp: float | None = None) -> LiveNoteEvent | None:
    """Turn raw MIDI bytes into a note event, or None for anything else.

    A note-on with velocity 0 is how many keyboards send note-off, so it is
    reported as a release rather than a key press.
    """
    try:
        msg = mido.parse(list(data))
    except (ValueError, TypeError) as exc:
        logger.debug("Dropping malformed MIDI message %r: %s", data, exc)
        return None
    if msg is None:
        return None
    ts = time.time() if timestamp is None else timestamp
    if msg.type == "note_on" and msg.velocity > 0:
        return LiveNoteEvent(pitch=msg.note, velocity=msg.velocity, timestamp=ts, is_note_on=True)
    if msg.type == "note_off" or msg.type == "note_on":
        return LiveNoteEvent(pitch=msg.note, velocity=0, timestamp=ts, is_note_on=False)
    return None


def note_ons(source: InputSource) -> Iterator[int]:
    """Drain a source, yielding the pitch of each key press in arrival order."""
    while True:
        evt = source.poll()
        if evt is None:
            return
        if evt.is_note_on and evt.velocity > 0:
            yield evt.pitch


# Computer keyboard -> semitone offset from the base C
_WHITE_ROW = {
    pygame.K_z: 0, pygame.K_x: 2, pygame.K_c: 4, pygame.K_v: 5,
    pygame.K_b: 7, pygame.K_n: 9, pygame.K_m: 11, pygame.K_COMMA: 12,
}
_BLACK_ROW = {
    pygame.K_s: 1, pygame.K_d: 3, pygame.K_g: 6, pygame.K_h: 8, pygame.K_j: 10,
}
_KEY_TO_OFFSET: dict[int, int] = {**_WHITE_ROW, **_BLACK_ROW}

_OCTAVE_DOWN = pygame.K_MINUS
_OCTAVE_UP = pygame.K_EQUALS


class KeyboardInput:
    """Fallback input using the computer keyboard as one movable octave.

    ``-`` and ``=`` shift the octave so every staff note is reachable.
    """

    def __init__(self, base_pitch: int = 60, velocity: int = 80) -> None:
        self.base_pitch = base_pitch
        self._velocity = velocity
        self._events: list[LiveNoteEvent] = []
        self._held: dict[int, int] = {}  # key -> pitch sounding

    def feed_event(self, event: pygame.event.Event) -> None:
        """Call from the game loop for each pygame event."""
        if event.type == pygame.KEYDOWN:
            if event.key == _OCTAVE_DOWN:
                self.base_pitch = max(0, self.base_pitch - 12)
            elif event.key == _OCTAVE_UP:
                self.base_pitch = min(115, self.base_pitch + 12)
            elif event.key in _KEY_TO_OFFSET and event.key not in self._held:
                pitch = self.base_pitch + _KEY_TO_OFFSET[event.key]
                self._held[event.key] = pitch
                self._events.append(LiveNoteEvent(
                    pitch=pitch, velocity=self._velocity,
                    timestamp=time.time(), is_note_on=True,
                ))
        elif event.type == pygame.KEYUP and event.key in self._held:
            pitch = self._held.pop(event.key)
            self._events.append(LiveNoteEvent(
                pitch=pitch, velocity=0,
                timestamp=time.time(), is_note_on=False,
            ))

    def poll(self) -> LiveNoteEvent | None:
        if self._events:
            return self._events.pop(0)
        return None

    def close(self) -> None:
        self._events.clear()
        self._held.clear()


class MidiInput:
    def __init__(self, port_index: int | None = None) -> None:
        self.midi_in = rtmidi.MidiIn()
        self._port_index = port_index
        self._open = False

    @staticmethod
    def list_ports() -> list[str]:
        return rtmidi.MidiIn().get_ports()

    def open(self) -> None:
        ports = self.midi_in.get_ports()
        if not ports:
            raise MidiDeviceError("No MIDI input devices found")
        idx = self._port_index if self._port_index is not None else 0
        if not 0 <= idx < len(ports):
            raise MidiDeviceError(f"MIDI port {idx} out of range (found {len(ports)})")
        self.midi_in.open_port(idx)
        self._open = True
        logger.info("Listening on MIDI port %s", ports[idx])

    def poll(self) -> LiveNoteEvent | None:
        """Non-blocking poll for the next note message. Returns None if none pending."""
        if not self._open:
            return None
        while True:
            msg = self.midi_in.get_message()
            if msg is None:
                return None
            data, _delta = msg
            evt = decode_message(data)
            if evt is not None:
                return evt

    def close(self) -> None:
        if self._open:
            self.midi_in.close_port()
            self._open = False
