"""Inventory services: user lookups, stock changes, summaries and session purge."""
