# src/logging/__init__.py
"""Structured logging with request context."""
