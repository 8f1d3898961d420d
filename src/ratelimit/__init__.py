# src/ratelimit/__init__.py
"""Token-bucket rate limiting per actor and provider."""
