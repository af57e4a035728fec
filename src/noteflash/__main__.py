"""Entry point for `python -m noteflash` or the `noteflash` console script."""

import argparse
import logging
import random
from pathlib import Path

from noteflash.models import ClefMode, ConfigurationError
from noteflash.progress import DEFAULT_DB_PATH
from noteflash.settings import load_settings, save_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="NoteFlash — note reading trainer")
    parser.add_argument("--count", type=int, help="Number of notes in the session")
    parser.add_argument(
        "--clef", choices=[m.value for m in ClefMode], help="Clef to practice"
    )
    parser.add_argument("--min-note", type=int, help="Lowest MIDI note on your keyboard")
    parser.add_argument("--max-note", type=int, help="Highest MIDI note on your keyboard")
    parser.add_argument(
        "--save", action="store_true", help="Remember --count/--clef/range as defaults"
    )
    parser.add_argument("--midi-port", type=int, help="MIDI input port index")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="Practice history file")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible targets")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    user = load_settings()
    if args.count is not None:
        user.note_count = args.count
    if args.clef is not None:
        user.clef_mode = ClefMode(args.clef).name
    if args.min_note is not None:
        user.min_midi_note = args.min_note
    if args.max_note is not None:
        user.max_midi_note = args.max_note
    if user.note_count <= 0:
        parser.error(f"--count must be positive, got {user.note_count}")
    if args.save:
        save_settings(user)

    from noteflash.app import App

    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        app = App(user.practice_settings(), midi_port=args.midi_port, db_path=args.db, rng=rng)
    except ConfigurationError as exc:
        parser.error(str(exc))
    app.run()


if __name__ == "__main__":
    main()
