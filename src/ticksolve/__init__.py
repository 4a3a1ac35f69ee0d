"""TickSolve: student complaint tracking."""

__version__ = "0.1.0"
