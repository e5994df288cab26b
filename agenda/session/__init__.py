from .editor import DayState, EditSession

__all__ = ["DayState", "EditSession"]
