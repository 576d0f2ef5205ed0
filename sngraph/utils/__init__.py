"""Utility helpers for sngraph."""
