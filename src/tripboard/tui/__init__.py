"""Textual user interface for Tripboard."""
