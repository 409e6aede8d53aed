"""Custom exceptions for Hooks Lab."""

from pathlib import Path


def sanitize_path_for_error(path: str | Path) -> str:
    """Extract only the filename from a path for safe error messages.

    Args:
        path: Full path or filename.

    Returns:
        Just the filename portion.
    """
    if isinstance(path, Path):
        return path.name
    return Path(path).name


class HooksLabError(Exception):
    """Base exception for all hooks-lab errors."""

    pass


class ConfigurationError(HooksLabError):
    """Raised when configuration is invalid."""

    pass


class PayloadDecodeError(HooksLabError):
    """Raised when the hook payload on stdin is not valid JSON.

    The dispatcher always catches this and continues with placeholder values.
    """

    def __init__(self, reason: str, raw_length: int = 0) -> None:
        self.reason = reason
        self.raw_length = raw_length
        super().__init__(f"Could not decode hook payload ({raw_length} bytes): {reason}")


class StorageError(HooksLabError):
    """Raised when a record cannot be written to disk."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Failed to write {sanitize_path_for_error(path)}: {reason}")
