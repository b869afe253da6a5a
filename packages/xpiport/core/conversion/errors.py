from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class ConversionErrorData(BaseModel):
    """Structured data for conversion errors.

    Args:
        message: Human-readable error description
        path: File the error relates to (if any)
        cause: Original exception that caused this error
    """

    model_config = {"arbitrary_types_allowed": True}

    message: str
    path: Path | None = None
    cause: BaseException | None = Field(default=None, repr=False)


class ConversionError(Exception):
    """Base exception for fatal conversion failures.

    Attributes:
        data: Structured error data (ConversionErrorData)
        message: Human-readable error description
        path: File the error relates to
        cause: Original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.data = ConversionErrorData(
            message=message,
            path=Path(path) if path is not None else None,
            cause=cause,
        )
        self.message = self.data.message
        self.path = self.data.path
        self.cause = self.data.cause

        super().__init__(str(self))

    def __str__(self) -> str:
        """Format error for logging and display."""
        parts = [self.message]
        if self.path is not None:
            parts.append(str(self.path))
        if self.cause is not None:
            parts.append(f"cause={self.cause}")
        return " | ".join(parts)


class ArchiveError(ConversionError):
    """Package archive could not be opened, extracted or written."""


class MetadataError(ConversionError):
    """install.rdf is missing or is not well-formed XML."""
