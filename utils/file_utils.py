from __future__ import annotations

import os
from pathlib import Path

__all__: list[str] = [
    "FileMissingError",
    "FileUtils",
    "FileUtilsError",
    "UnsupportedFileFormatError",
]


class FileUtils:
    """Path helpers for the config file, the log file and input documents."""

    @staticmethod
    def resolve_path(path: str | Path, *, strict: bool = False) -> Path:
        """Convert a user-supplied path to an absolute path.

        Expands environment variables (e.g., $HOME, %APPDATA%) and ~, and resolves relative
        paths against the current working directory.

        Args:
            path (str | Path): The input path (e.g., "~/logs/$APP_ENV/docspeak.log").
            strict (bool): Raise if the path does not exist. Defaults to False.

        Returns:
            Path: The absolute path.
        """
        expanded: str = os.path.expandvars(str(path))
        user_expanded: Path = Path(expanded).expanduser()

        if user_expanded.is_absolute():
            return user_expanded.resolve(strict=strict)
        return (Path.cwd() / user_expanded).resolve(strict=strict)

    @staticmethod
    def validate_file_path(file_path: Path, suffix: list[str] | str) -> None:
        """Validate that a file exists and has an allowed suffix.

        Args:
            file_path (Path): The path to the file to validate.
            suffix (list[str] | str): Allowed suffix(es) (e.g., [".txt", ".md"] or ".txt").

        Raises:
            FileMissingError: If the file does not exist or is not a regular file.
            UnsupportedFileFormatError: If the file's suffix is not in the allowed list.
        """
        if isinstance(suffix, str):
            suffix = [suffix]

        if not file_path.is_file():
            msg = f"File does not exist: {file_path}"
            raise FileMissingError(msg)
        if file_path.suffix.lower() not in [s.lower() for s in suffix]:
            msg = f"Unsupported file format: '{file_path.suffix}'. Supported formats are: {', '.join(suffix)}"
            raise UnsupportedFileFormatError(msg)


class FileUtilsError(Exception):
    """Base exception for FileUtils errors."""


class FileMissingError(FileUtilsError):
    """The file does not exist."""


class UnsupportedFileFormatError(FileUtilsError):
    """The file suffix is not supported."""
