# src/translation/__init__.py
"""Provider gateways and the translation orchestrator."""
