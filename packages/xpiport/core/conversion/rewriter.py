"""Chrome manifest line rewriting."""

from __future__ import annotations

from collections.abc import Iterable


def rewrite_manifest_line(line: str, replacements: Iterable[tuple[str, str]]) -> str:
    """Mirror a manifest line with target-application chrome URIs.

    Every (source, target) pair is applied as a global, case-sensitive
    literal substitution across the whole line.

    Args:
        line: Trimmed manifest directive line
        replacements: Ordered (source, target) chrome URI pairs

    Returns:
        The rewritten line, or an empty string when nothing matched

    Example:
        >>> rewrite_manifest_line(
        ...     "overlay chrome://browser/content/browser.xul chrome://foo/bar.xul",
        ...     [(
        ...         "chrome://browser/content/browser.xul",
        ...         "chrome://navigator/content/navigator.xul",
        ...     )],
        ... )
        'overlay chrome://navigator/content/navigator.xul chrome://foo/bar.xul'
    """
    converted = line
    for source, target in replacements:
        if source:
            converted = converted.replace(source, target)

    return converted if converted != line else ""
