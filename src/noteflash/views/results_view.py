"""End-of-session summary plus the notes that need the most work."""

from __future__ import annotations

import pygame

from noteflash.models import NoteTarget
from noteflash.renderer import colors as colors_mod
from noteflash.staff import render_staff
from noteflash.stats import (
    cross_session_note_performance,
    first_try_correct_count,
    multiple_attempts_count,
)
from noteflash.views.base import ViewAction, ViewContext

_WORST_SHOWN = 3
_THUMB_WIDTH = 200


class ResultsView:
    name = "results"

    def __init__(self) -> None:
        self._context: ViewContext | None = None
        self._font: pygame.font.Font | None = None
        self._lines: list[str] = []
        self._worst: list[NoteTarget] = []

    def on_enter(self, context: ViewContext) -> None:
        self._context = context
        self._font = pygame.font.SysFont("monospace", 18)
        self._lines = []
        self._worst = []

        record = context.record
        if record is not None:
            self._lines.append(
                f"First try correct: {first_try_correct_count(record.attempts)}   "
                f"Multiple attempts: {multiple_attempts_count(record.attempts)}   "
                f"Total attempts: {record.total_attempts}"
            )

        history = context.progress.fetch_all_sessions() if context.progress else []
        if not history and record is not None:
            history = [record]
        for perf in cross_session_note_performance(history)[:_WORST_SHOWN]:
            self._lines.append(
                f"{perf.name} ({perf.clef.value}): {perf.accuracy:.0%} "
                f"of {perf.total_count}"
            )
            self._worst.append(NoteTarget(midi=perf.midi, clef=perf.clef, accidental=perf.accidental))

    def on_exit(self) -> None:
        pass

    def handle_event(self, event: pygame.event.Event) -> ViewAction | None:
        if event.type != pygame.KEYDOWN:
            return None
        if event.key == pygame.K_ESCAPE:
            return ViewAction(kind="quit")
        if event.key in (pygame.K_RETURN, pygame.K_SPACE):
            return ViewAction(kind="switch", target="drill", context_patch={"record": None})
        return None

    def update(self, dt: float) -> ViewAction | None:
        return None

    def draw(self, surface: pygame.Surface) -> None:
        if self._font is None:
            return
        surface.fill(colors_mod.BG)
        w, h = surface.get_size()

        y = 20
        for line in self._lines:
            text = self._font.render(line, True, colors_mod.HUD_TEXT)
            surface.blit(text, (20, y))
            y += 26

        # Thumbnails share the live drill's geometry, shifted below the text
        for i, target in enumerate(self._worst):
            render_staff(surface, target, x=20 + i * (_THUMB_WIDTH + 20), y_offset=y - 60,
                         width=_THUMB_WIDTH)

        hint = self._font.render("Enter: practice again   Esc: quit", True, colors_mod.STAFF_TEXT)
        surface.blit(hint, (20, h - 30))
