# src/config/__init__.py
"""Typed settings."""
