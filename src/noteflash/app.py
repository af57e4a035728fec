"""Top-level application: initializes pygame, manages screens, and runs the loop."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

import pygame

from noteflash.config import FPS, WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH
from noteflash.midi_input import KeyboardInput, MidiInput
from noteflash.models import PracticeSettings
from noteflash.progress import DEFAULT_DB_PATH, ProgressTracker
from noteflash.views.base import ViewContext, ViewManager
from noteflash.views.drill_view import DrillView
from noteflash.views.results_view import ResultsView

logger = logging.getLogger(__name__)


class App:
    def __init__(
        self,
        settings: PracticeSettings,
        midi_port: int | None = None,
        db_path: Any = DEFAULT_DB_PATH,
        rng: Any = None,
    ) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()

        # Optional subsystems degrade to None
        self._midi_input = self._try_midi(midi_port)
        self._progress = self._try_progress(db_path)
        self._keyboard_input = KeyboardInput()

        context = ViewContext(
            screen_size=(WINDOW_WIDTH, WINDOW_HEIGHT),
            settings=settings,
            midi_input=self._midi_input,
            keyboard_input=self._keyboard_input,
            progress=self._progress,
            rng=rng,
        )

        self.views = ViewManager(context)
        self.views.register(DrillView)
        self.views.register(ResultsView)
        self.views.push("drill")

    def run(self) -> None:
        running = True
        while running:
            dt = self.clock.tick(FPS) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                else:
                    self._keyboard_input.feed_event(event)
                    if not self.views.handle_event(event):
                        running = False
            if running:
                if not self.views.update(dt):
                    running = False
            self.views.draw(self.screen)
            pygame.display.flip()

        self._cleanup()
        pygame.quit()

    def _cleanup(self) -> None:
        while self.views.active_view:
            self.views.pop()
        if self._midi_input:
            self._midi_input.close()
        if self._progress:
            self._progress.close()

    @staticmethod
    def _try_midi(port: int | None) -> MidiInput | None:
        try:
            mi = MidiInput(port)
            mi.open()
            return mi
        except Exception as exc:
            logger.warning("MIDI input unavailable, using computer keyboard: %s", exc)
            return None

    @staticmethod
    def _try_progress(db_path: Any) -> ProgressTracker | None:
        try:
            return ProgressTracker(db_path)
        except (OSError, sqlite3.Error) as exc:
            logger.warning("Practice history disabled: %s", exc)
            return None
