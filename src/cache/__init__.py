# src/cache/__init__.py
"""Two-tier translation cache."""
