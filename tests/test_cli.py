"""Tests for command-line parsing."""

from pathlib import Path

import pytest

from noteflash import __main__
from noteflash.__main__ import build_parser
from noteflash.settings import UserSettings


def test_defaults():
    args = build_parser().parse_args([])
    assert args.count is None
    assert args.clef is None
    assert isinstance(args.db, Path)
    assert not args.save


def test_practice_overrides():
    args = build_parser().parse_args(
        ["--count", "5", "--clef", "bass", "--min-note", "36", "--max-note", "84", "--seed", "3"]
    )
    assert args.count == 5
    assert args.clef == "bass"
    assert (args.min_note, args.max_note) == (36, 84)
    assert args.seed == 3


def test_non_positive_count_is_rejected_before_saving(monkeypatch):
    saved = []
    monkeypatch.setattr(__main__, "load_settings", UserSettings)
    monkeypatch.setattr(__main__, "save_settings", lambda settings: saved.append(settings))
    with pytest.raises(SystemExit) as exc:
        __main__.main(["--count", "0", "--save"])
    assert exc.value.code == 2
    assert saved == []
