# src/api/__init__.py
"""Process-wide component wiring."""
