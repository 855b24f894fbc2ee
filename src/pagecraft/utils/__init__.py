"""Utility helpers for pagecraft."""
