"""Core building blocks shared by the hook handlers."""
