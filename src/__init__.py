# src/__init__.py
"""medtranslate: medical document extraction, analysis and translation."""

from medtranslate.version import __version__

__all__ = ["__version__"]
