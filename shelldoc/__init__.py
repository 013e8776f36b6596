"""shelldoc - turn terminal history into clean, reproducible documentation."""

__version__ = "0.1.0"
