"""
Custom Exceptions for HTML Source Chunking.

The chunking engine itself is lenient: malformed HTML, empty input and
oversized sentences never raise. Exceptions are reserved for caller
contract violations and for the file-based entry points.

Exception Hierarchy:
    ChunkingError (base)
    ├── InvalidModeError      (also a ValueError)
    └── SourceNotFoundError   (also a FileNotFoundError)

Usage:
    from html_chunking.exceptions import ChunkingError, InvalidModeError

    try:
        chunks = chunk_html("src-1", "Notes", html, mode)
    except InvalidModeError as e:
        print(f"Bad mode: {e.mode}")
"""

from __future__ import annotations

from typing import Optional


class ChunkingError(Exception):
    """
    Base exception for all chunking-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A chunking error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class InvalidModeError(ChunkingError, ValueError):
    """
    Raised when the dispatcher receives a mode other than
    "structured" or "flat".

    Attributes:
        mode: The rejected mode value
    """

    def __init__(self, mode: object):
        self.mode = mode
        super().__init__(
            message=f"Unsupported chunking mode: {mode!r}",
            details="expected 'structured' or 'flat'",
        )


class SourceNotFoundError(ChunkingError, FileNotFoundError):
    """
    Raised when an HTML source file cannot be found.

    Attributes:
        path: Path to the missing file
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(message=f"Source file not found: {path}")
