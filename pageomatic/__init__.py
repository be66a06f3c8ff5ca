"""Page-O-Matic: section-based page composition with component persistence."""

__version__ = "0.1.0"
