"""Adapters for external tools queried by the hooks."""
