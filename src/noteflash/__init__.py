"""NoteFlash — sight-reading trainer for MIDI keyboards."""

__version__ = "0.1.0"
