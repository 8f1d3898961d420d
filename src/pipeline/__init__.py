# src/pipeline/__init__.py
"""Document processing pipeline."""
