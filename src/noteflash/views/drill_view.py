"""Note-reading drill: show a target on the staff and wait for the right key."""

from __future__ import annotations

import pygame

from noteflash.config import FEEDBACK_CLEAR_SECONDS
from noteflash.midi_input import note_ons
from noteflash.models import Outcome
from noteflash.renderer import colors as colors_mod
from noteflash.session import PracticeSession
from noteflash.staff import render_staff
from noteflash.views.base import ViewAction, ViewContext


class DrillView:
    name = "drill"

    def __init__(self) -> None:
        self._context: ViewContext | None = None
        self._session: PracticeSession | None = None
        self._font: pygame.font.Font | None = None
        self._since_feedback: float = 0.0
        self._saved = False

    def on_enter(self, context: ViewContext) -> None:
        self._context = context
        self._font = pygame.font.SysFont("monospace", 20)
        self._session = PracticeSession(context.settings, rng=context.rng)
        self._since_feedback = FEEDBACK_CLEAR_SECONDS
        self._saved = False

    def on_exit(self) -> None:
        pass

    def handle_event(self, event: pygame.event.Event) -> ViewAction | None:
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return ViewAction(kind="pop")
        return None

    def update(self, dt: float) -> ViewAction | None:
        session = self._session
        if session is None or self._context is None:
            return None
        self._since_feedback += dt

        for source in (self._context.midi_input, self._context.keyboard_input):
            if source is None:
                continue
            for pitch in note_ons(source):
                result = session.record_played_note(pitch)
                if result.outcome is not None:
                    self._since_feedback = 0.0

        if session.is_complete():
            return self._finish()
        return None

    def _finish(self) -> ViewAction | None:
        if self._saved or self._session is None or self._context is None:
            return None
        self._saved = True
        record = self._session.to_record()
        if self._context.progress:
            self._context.progress.save_session(record)
        return ViewAction(kind="switch", target="results", context_patch={"record": record})

    def draw(self, surface: pygame.Surface) -> None:
        session = self._session
        if session is None or self._font is None:
            return

        surface.fill(colors_mod.BG)
        w, h = surface.get_size()

        target = session.current_target()
        if target is not None:
            wrong: list[int] = []
            for attempt in reversed(session.attempts()):
                if attempt.outcome != Outcome.INCORRECT:
                    break
                wrong.insert(0, attempt.played_midi)
            render_staff(surface, target, x=40, y_offset=0, width=w - 80, wrong_midis=wrong[-3:])

        message = session.feedback_message(
            show_correct=self._since_feedback < FEEDBACK_CLEAR_SECONDS
        )
        last = session.last_result()
        color = colors_mod.HUD_TEXT
        if last is not None and message.startswith("Try again"):
            color = colors_mod.NOTE_WRONG
        elif last is not None and message.startswith("Correct"):
            color = colors_mod.NOTE_CORRECT
        text = self._font.render(message, True, color)
        surface.blit(text, (20, h - 60))

        progress = self._font.render(
            f"{session.current_index}/{session.count}", True, colors_mod.HUD_TEXT
        )
        surface.blit(progress, (w - progress.get_width() - 20, 20))
