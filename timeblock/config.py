"""
Runtime settings for the time block planner, read from the environment.
"""

import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./timeblock.db")

# Working-day window covered by the slot grid. DAY_END is exclusive.
DAY_START = os.getenv("DAY_START", "08:00")
DAY_END = os.getenv("DAY_END", "17:30")
SLOT_MINUTES = int(os.getenv("SLOT_MINUTES", "15"))

SAVE_DEBOUNCE_SECONDS = float(os.getenv("SAVE_DEBOUNCE_SECONDS", "1.0"))

# Only used to decide which calendar day "today" is
LOCAL_TIMEZONE = os.getenv("LOCAL_TIMEZONE", "UTC")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
