# src/llm/adapters/__init__.py
"""Provider SDK adapters."""
