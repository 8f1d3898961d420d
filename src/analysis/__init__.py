# src/analysis/__init__.py
"""Keyword ranking, extractive summaries and the content analyzer."""
