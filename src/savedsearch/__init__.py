"""Saved-search selection and commit workflow."""

__version__ = "0.1.0"
