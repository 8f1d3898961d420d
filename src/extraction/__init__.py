# src/extraction/__init__.py
"""Text extraction from PDF and image uploads."""
