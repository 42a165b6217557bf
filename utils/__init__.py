"""Shared helpers for month arithmetic and logging setup."""
