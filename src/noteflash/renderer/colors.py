"""Color palette (colorblind-safe defaults)."""

# RGB tuples
BG = (245, 242, 232)
STAFF_LINE = (40, 40, 48)
STAFF_TEXT = (90, 90, 100)
LEDGER = (40, 40, 48)
NOTE_TARGET = (20, 20, 24)
NOTE_CORRECT = (40, 160, 70)
NOTE_WRONG = (200, 50, 50)
HUD_TEXT = (60, 60, 70)
