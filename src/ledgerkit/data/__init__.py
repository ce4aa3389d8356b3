"""Bundled chart-of-accounts data."""
