"""Adapters that run test queries against SQL engines."""
