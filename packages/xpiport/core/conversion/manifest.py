"""Chrome manifest transformation.

Walks ``chrome.manifest`` and every manifest it includes through ``manifest``
directives, mirroring ``overlay``/``override`` lines for the target
application. Original lines are always kept; mirrored lines are inserted
directly below the line they were derived from. Bytes that are not valid
UTF-8 are carried through unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from xpiport.core.conversion.models import ConversionLog
from xpiport.core.conversion.rewriter import rewrite_manifest_line
from xpiport.core.utils.logging import get_logger

logger = get_logger(__name__)

MIRRORED_DIRECTIVES: frozenset[str] = frozenset({"overlay", "override"})


def normalize_manifest_path(raw: str) -> str:
    """Turn a ``manifest`` directive argument into a working-dir relative path.

    Leading ``.``, ``/`` and ``\\`` characters are stripped and backslashes
    are treated as separators.

    Example:
        >>> normalize_manifest_path("./chrome/sub.manifest")
        'chrome/sub.manifest'
        >>> normalize_manifest_path("\\\\chrome\\\\sub.manifest")
        'chrome/sub.manifest'
    """
    stripped = raw.lstrip("./\\").replace("\\", "/")
    return str(PurePosixPath(stripped)) if stripped else ""


def _printable(text: str) -> str:
    """Replace undecodable bytes (kept as surrogates) for display."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def _line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith(("\n", "\r")):
        return line[-1]
    return ""


def transform_manifest(
    working_dir: Path | str,
    manifest_path: str,
    replacements: Iterable[tuple[str, str]],
    log: ConversionLog,
    visited: set[Path] | None = None,
) -> int:
    """Convert a chrome manifest and everything it includes.

    Args:
        working_dir: Directory holding the extracted package
        manifest_path: Manifest path relative to ``working_dir``
        replacements: Ordered (source, target) chrome URI pairs
        log: Receives one message per added line
        visited: Resolved manifest files already walked; a repeat visit is a no-op

    Returns:
        Number of manifest files modified, nested manifests included

    Raises:
        OSError: If a manifest cannot be read or written
    """
    working_dir = Path(working_dir)
    replacements = tuple(replacements)
    visited = visited if visited is not None else set()

    relative = normalize_manifest_path(manifest_path)
    if not relative:
        return 0

    manifest_file = working_dir / relative
    resolved = manifest_file.resolve()
    if not resolved.is_relative_to(working_dir.resolve()):
        logger.warning(f"Ignoring manifest outside the package: {manifest_path}")
        return 0
    # keyed on the resolved file so ".." aliases count once
    if resolved in visited:
        return 0
    visited.add(resolved)

    if not manifest_file.is_file():
        logger.debug(f"Manifest not present, skipping: {relative}")
        return 0

    logger.debug(f"Converting manifest: {relative}")

    with manifest_file.open("r", encoding="utf-8", errors="surrogateescape", newline="") as f:
        lines = f.read().splitlines(keepends=True)

    converted_count = 0
    is_converted = False
    output: list[str] = []

    for line in lines:
        trimmed = line.strip()
        new_line = ""

        if trimmed and not trimmed.startswith("#"):
            tokens = trimmed.split()
            directive = tokens[0]

            if directive == "manifest" and len(tokens) > 1:
                converted_count += transform_manifest(
                    working_dir, tokens[1], replacements, log, visited
                )
            elif directive in MIRRORED_DIRECTIVES:
                new_line = rewrite_manifest_line(trimmed, replacements)

        output.append(line)

        if new_line:
            ending = _line_ending(line)
            if not ending:
                # last line without terminator
                ending = "\n"
                output[-1] = line + ending
            output.append(new_line + ending)
            log.add(f"Added new line to {_printable(relative)}: '{_printable(new_line)}'")
            is_converted = True

    if is_converted:
        with manifest_file.open("w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write("".join(output))
        converted_count += 1

    return converted_count
