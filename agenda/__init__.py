"""Conference program schedule editor core."""

__version__ = "0.1.0"
