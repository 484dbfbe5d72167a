"""Data structures shared by the extraction and matching pipeline."""
