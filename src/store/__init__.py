"""Versioned store layer.

This package persists one immutable delta per version number and
exposes the open/append/close gateway used by the ingest driver.
"""
