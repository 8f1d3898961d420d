# src/llm/__init__.py
"""LLM client interface and factory."""
