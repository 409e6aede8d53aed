"""Tooling for installing the hooks into a client configuration."""
