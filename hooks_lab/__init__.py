"""Hooks Lab - verbose lifecycle hooks for AI coding-assistant plugins."""

__version__ = "0.1.0"

__all__ = ["__version__"]
