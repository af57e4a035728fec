"""Tests for random target generation."""

import logging
import random

import pytest

from noteflash.generator import (
    choose_clef,
    clef_range,
    effective_range,
    generate_targets,
    is_natural,
    random_note,
)
from noteflash.models import Clef, ClefMode, ConfigurationError, PracticeSettings


@pytest.mark.parametrize("clef", list(Clef))
@pytest.mark.parametrize("allowed", [None, (48, 72), (36, 96), (21, 108)])
def test_random_note_stays_in_range_and_natural(clef, allowed):
    rng = random.Random(1234)
    (lower, upper), _ = effective_range(clef, allowed)
    for _ in range(10_000):
        midi = random_note(clef, allowed, rng)
        assert lower <= midi <= upper
        assert is_natural(midi)


def test_effective_range_intersects_calibration():
    assert effective_range(Clef.TREBLE, (48, 72)) == ((60, 72), False)
    assert effective_range(Clef.BASS, (48, 72)) == ((48, 60), False)
    assert effective_range(Clef.TREBLE, None) == ((60, 108), False)


def test_disjoint_range_falls_back_to_clef_range(caplog):
    rng = random.Random(7)
    with caplog.at_level(logging.WARNING, logger="noteflash.generator"):
        midi = random_note(Clef.BASS, (100, 127), rng)
    lower, upper = clef_range(Clef.BASS)
    assert lower <= midi <= upper
    assert "no natural notes" in caplog.text


@pytest.mark.parametrize("allowed", [(61, 61), (66, 66)])
def test_range_without_naturals_falls_back_to_clef_range(caplog, allowed):
    # C#4 or F#4 alone: overlaps the treble range but holds no natural pitch
    assert effective_range(Clef.TREBLE, allowed) == ((60, 108), True)
    with caplog.at_level(logging.WARNING, logger="noteflash.generator"):
        midi = random_note(Clef.TREBLE, allowed, random.Random(0))
    assert 60 <= midi <= 108
    assert is_natural(midi)
    assert "no natural notes" in caplog.text


def test_seeded_generation_is_reproducible():
    a = [random_note(Clef.TREBLE, None, random.Random(42)) for _ in range(5)]
    b = [random_note(Clef.TREBLE, None, random.Random(42)) for _ in range(5)]
    assert a == b


def test_choose_clef_fixed_modes():
    assert choose_clef(ClefMode.TREBLE) == Clef.TREBLE
    assert choose_clef(ClefMode.BASS) == Clef.BASS


def test_choose_clef_random_uses_both():
    rng = random.Random(3)
    seen = {choose_clef(ClefMode.RANDOM, rng) for _ in range(200)}
    assert seen == {Clef.TREBLE, Clef.BASS}


def test_generate_targets_count_and_clef():
    settings = PracticeSettings(count=8, clef_mode=ClefMode.BASS, allowed_range=(36, 84))
    targets = generate_targets(settings, random.Random(5))
    assert len(targets) == 8
    for t in targets:
        assert t.clef == Clef.BASS
        assert t.accidental == ""
        assert 36 <= t.midi <= 60


def test_generate_targets_rejects_non_positive_count():
    with pytest.raises(ConfigurationError):
        generate_targets(PracticeSettings(count=0))
