"""Tripboard - a terminal trip planner."""

__version__ = "0.1.0"
