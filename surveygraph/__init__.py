"""Survey aggregation and graph-construction pipeline for student mental-health data."""

__version__ = "0.1.0"
