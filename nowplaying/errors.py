"""Error codes and error handling utilities for the skin engine."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for skin loading and resolution."""

    # File system
    FILE_MISSING = auto()
    FILE_UNREADABLE = auto()

    # Documents
    DOCUMENT_INVALID = auto()
    BUILTIN_BROKEN = auto()

    # Orchestration
    WATCHER_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.FILE_MISSING: "The skin file was not found. Built-in defaults are used instead.",
    ErrorCode.FILE_UNREADABLE: "The skin file could not be read. Check permissions and encoding.",

    ErrorCode.DOCUMENT_INVALID: "The skin document is malformed. Built-in defaults are used instead.",
    ErrorCode.BUILTIN_BROKEN: "The built-in skin documents are broken. Reinstall the application.",

    ErrorCode.WATCHER_FAILED: "Skin hot reload could not be started.",
}


@dataclass
class SkinEngineError(Exception):
    """Base exception for the skin engine with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f" ({self.path})")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f": {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or UI display."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
        }


class DocumentError(ValueError):
    """Raised when a decoded document does not match the skin schema."""


def classify_exception(exc: Exception, path: Path | None = None) -> SkinEngineError:
    """Classify a read/parse exception into a SkinEngineError with an appropriate code."""
    if isinstance(exc, SkinEngineError):
        return exc
    if isinstance(exc, FileNotFoundError):
        return SkinEngineError(
            ErrorCode.FILE_MISSING,
            message=f"{path.name if path else 'File'} not found",
            path=path,
        )
    if isinstance(exc, PermissionError):
        return SkinEngineError(
            ErrorCode.FILE_UNREADABLE,
            message="Permission denied",
            path=path,
            details={"error": str(exc)},
        )
    if isinstance(exc, UnicodeDecodeError):
        return SkinEngineError(
            ErrorCode.FILE_UNREADABLE,
            message="File is not valid UTF-8",
            path=path,
            details={"error": str(exc)},
        )
    if isinstance(exc, OSError):
        return SkinEngineError(
            ErrorCode.FILE_UNREADABLE,
            message="Could not read file",
            path=path,
            details={"error": str(exc)},
        )
    if isinstance(exc, tomllib.TOMLDecodeError):
        return SkinEngineError(
            ErrorCode.DOCUMENT_INVALID,
            message="Malformed TOML",
            path=path,
            details={"error": str(exc)},
        )
    if isinstance(exc, RecursionError):
        return SkinEngineError(
            ErrorCode.DOCUMENT_INVALID,
            message="Document is nested too deeply",
            path=path,
        )
    if isinstance(exc, DocumentError):
        return SkinEngineError(
            ErrorCode.DOCUMENT_INVALID,
            message="Unexpected document structure",
            path=path,
            details={"error": str(exc)},
        )

    return SkinEngineError(
        ErrorCode.DOCUMENT_INVALID,
        message=f"{type(exc).__name__}: {exc}",
        path=path,
    )
