"""Utility helpers for wpbook."""
