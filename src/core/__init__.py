# src/core/__init__.py
"""Shared models, errors and text similarity."""
