"""Value types produced by a conversion run."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
import xml.etree.ElementTree as ET

from pydantic import BaseModel, ConfigDict, Field

from xpiport.core.utils.logging import get_logger

logger = get_logger(__name__)


class ConversionLog:
    """Ordered, append-only record of the mutations made during one conversion.

    Each message is also forwarded to the module logger so that batch runs
    leave a trail even when the caller ignores the returned messages.

    Example:
        >>> log = ConversionLog()
        >>> log.add("install.rdf: Added missing maxVersion")
        >>> log.messages
        ('install.rdf: Added missing maxVersion',)
    """

    def __init__(self) -> None:
        self._messages: list[str] = []

    def add(self, message: str) -> None:
        """Append a message."""
        self._messages.append(message)
        logger.info(message)

    @property
    def messages(self) -> tuple[str, ...]:
        """Snapshot of the messages recorded so far."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._messages))


@dataclass(frozen=True)
class MetadataResult:
    """Outcome of transforming install.rdf.

    The document is always returned (it is mutated in place); ``changed``
    tells whether it needs to be written back.
    """

    changed: bool
    document: ET.ElementTree


class ConversionResult(BaseModel):
    """Outcome of converting a single package.

    Attributes:
        source: Path of the original package
        output_path: Path of the converted package, None if nothing changed
        metadata_changed: Whether install.rdf was modified
        manifests_changed: Number of chrome manifest files modified
        messages: Human-readable log of every mutation performed
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: Path
    output_path: Path | None = None
    metadata_changed: bool = False
    manifests_changed: int = Field(default=0, ge=0)
    messages: tuple[str, ...] = ()

    @property
    def converted(self) -> bool:
        """True when a new package was written."""
        return self.output_path is not None
