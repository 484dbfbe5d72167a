"""Helpers for testing code built on the SQL test runner."""
