"""Time block planner: plan the working day in 15-minute slots, log it, report on it."""

__version__ = "1.0.0"
