"""Case file lookup across client, intake, counselor and session records."""

__version__ = "0.1.0"
