# src/storage/__init__.py
"""SQLite handle, document store and translation error log."""
