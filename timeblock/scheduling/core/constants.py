"""
Shared constants for the scheduling grid.
"""

# Range selector states
IDLE = "IDLE"
DRAGGING = "DRAGGING"
COMMITTING = "COMMITTING"

MINUTES_PER_HOUR = 60
