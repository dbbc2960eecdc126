"""Local Kind cluster management from the terminal and a web dashboard."""

__version__ = "0.3.0"
