"""Utility helpers for taskline."""
