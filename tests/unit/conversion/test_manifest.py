"""Tests for chrome manifest traversal and conversion."""

from __future__ import annotations

from pathlib import Path

import pytest

from xpiport.core.conversion.manifest import normalize_manifest_path, transform_manifest

BROWSER_OVERLAY = "overlay chrome://browser/content/browser.xul chrome://foo/content/bar.xul"
NAVIGATOR_OVERLAY = (
    "overlay chrome://navigator/content/navigator.xul chrome://foo/content/bar.xul"
)


def _write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content.encode("utf-8"))
    return path


def _read(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("chrome/sub.manifest", "chrome/sub.manifest"),
        ("./chrome/sub.manifest", "chrome/sub.manifest"),
        ("\\chrome\\sub.manifest", "chrome/sub.manifest"),
        ("/sub.manifest", "sub.manifest"),
        ("./", ""),
    ],
)
def test_normalize_manifest_path(raw, expected):
    assert normalize_manifest_path(raw) == expected


def test_overlay_line_is_mirrored_below_original(tmp_path, replacements, log):
    manifest = _write(
        tmp_path,
        "chrome.manifest",
        f"content foo chrome/content/\n{BROWSER_OVERLAY}\nlocale foo en-US chrome/locale/\n",
    )

    count = transform_manifest(tmp_path, "chrome.manifest", replacements, log)

    assert count == 1
    assert _read(manifest).splitlines() == [
        "content foo chrome/content/",
        BROWSER_OVERLAY,
        NAVIGATOR_OVERLAY,
        "locale foo en-US chrome/locale/",
    ]
    assert log.messages == (f"Added new line to chrome.manifest: '{NAVIGATOR_OVERLAY}'",)


def test_override_line_is_mirrored(tmp_path, replacements, log):
    line = (
        "override chrome://browser/content/places/places.xul chrome://foo/content/places.xul"
    )
    manifest = _write(tmp_path, "chrome.manifest", line + "\n")

    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 1
    assert _read(manifest).splitlines()[1] == (
        "override chrome://communicator/content/bookmarks/bookmarksManager.xul "
        "chrome://foo/content/places.xul"
    )


def test_unmatched_manifest_is_left_alone(tmp_path, replacements, log):
    content = (
        "# comment\n"
        "\n"
        "content foo chrome/content/\n"
        "overlay chrome://global/content/console.xul chrome://foo/content/c.xul\n"
    )
    manifest = _write(tmp_path, "chrome.manifest", content)

    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 0
    assert _read(manifest) == content
    assert len(log) == 0


def test_commented_overlay_is_ignored(tmp_path, replacements, log):
    content = f"  # {BROWSER_OVERLAY}\n"
    manifest = _write(tmp_path, "chrome.manifest", content)

    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 0
    assert _read(manifest) == content


def test_other_directives_are_not_rewritten(tmp_path, replacements, log):
    content = "style chrome://browser/content/browser.xul chrome://foo/skin/foo.css\n"
    _write(tmp_path, "chrome.manifest", content)

    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 0


def test_missing_manifest_counts_zero(tmp_path, replacements, log):
    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 0


def test_original_lines_keep_their_whitespace(tmp_path, replacements, log):
    indented = "   overlay   chrome://browser/content/browser.xul   chrome://foo/content/bar.xul"
    manifest = _write(tmp_path, "chrome.manifest", indented + "\n")

    transform_manifest(tmp_path, "chrome.manifest", replacements, log)

    lines = _read(manifest).splitlines()
    assert lines[0] == indented
    assert lines[1] == (
        "overlay   chrome://navigator/content/navigator.xul   chrome://foo/content/bar.xul"
    )


def test_crlf_line_endings_are_preserved(tmp_path, replacements, log):
    manifest = _write(tmp_path, "chrome.manifest", f"{BROWSER_OVERLAY}\r\ncontent foo x/\r\n")

    transform_manifest(tmp_path, "chrome.manifest", replacements, log)

    assert _read(manifest) == f"{BROWSER_OVERLAY}\r\n{NAVIGATOR_OVERLAY}\r\ncontent foo x/\r\n"


def test_last_line_without_newline(tmp_path, replacements, log):
    manifest = _write(tmp_path, "chrome.manifest", f"content foo x/\n{BROWSER_OVERLAY}")

    transform_manifest(tmp_path, "chrome.manifest", replacements, log)

    assert _read(manifest) == f"content foo x/\n{BROWSER_OVERLAY}\n{NAVIGATOR_OVERLAY}\n"


def test_nested_manifest_is_converted(tmp_path, replacements, log):
    root_content = "manifest chrome/sub.manifest\ncontent foo x/\n"
    root = _write(tmp_path, "chrome.manifest", root_content)
    nested = _write(tmp_path, "chrome/sub.manifest", BROWSER_OVERLAY + "\n")

    count = transform_manifest(tmp_path, "chrome.manifest", replacements, log)

    assert count == 1
    assert _read(root) == root_content
    assert _read(nested) == f"{BROWSER_OVERLAY}\n{NAVIGATOR_OVERLAY}\n"
    assert log.messages == (f"Added new line to chrome/sub.manifest: '{NAVIGATOR_OVERLAY}'",)


def test_root_and_nested_both_counted(tmp_path, replacements, log):
    _write(tmp_path, "chrome.manifest", f"manifest ./a.manifest\n{BROWSER_OVERLAY}\n")
    _write(tmp_path, "a.manifest", "manifest \\b\\c.manifest\n" + BROWSER_OVERLAY + "\n")
    _write(tmp_path, "b/c.manifest", BROWSER_OVERLAY + "\n")

    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 3
    assert len(log) == 3


def test_missing_nested_manifest_is_skipped(tmp_path, replacements, log):
    _write(tmp_path, "chrome.manifest", f"manifest gone.manifest\n{BROWSER_OVERLAY}\n")

    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 1


def test_manifest_directive_without_path(tmp_path, replacements, log):
    _write(tmp_path, "chrome.manifest", "manifest\n")

    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 0


def test_inclusion_cycle_terminates(tmp_path, replacements, log):
    _write(tmp_path, "chrome.manifest", f"manifest a.manifest\n{BROWSER_OVERLAY}\n")
    a = _write(tmp_path, "a.manifest", f"manifest chrome.manifest\n{BROWSER_OVERLAY}\n")

    count = transform_manifest(tmp_path, "chrome.manifest", replacements, log)

    assert count == 2
    # each file converted exactly once
    assert _read(a).count(NAVIGATOR_OVERLAY) == 1


def test_self_inclusion_terminates(tmp_path, replacements, log):
    _write(tmp_path, "chrome.manifest", f"manifest ./chrome.manifest\n{BROWSER_OVERLAY}\n")

    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 1


def test_manifest_outside_working_dir_is_ignored(tmp_path, replacements, log):
    work = tmp_path / "work"
    _write(work, "chrome.manifest", "manifest sub/../../outside.manifest\n")
    outside = _write(tmp_path, "outside.manifest", BROWSER_OVERLAY + "\n")

    assert transform_manifest(work, "chrome.manifest", replacements, log) == 0
    assert _read(outside) == BROWSER_OVERLAY + "\n"


def test_parent_directory_alias_is_walked_once(tmp_path, replacements, log):
    (tmp_path / "sub").mkdir()
    manifest = _write(
        tmp_path, "chrome.manifest", f"manifest sub/../chrome.manifest\n{BROWSER_OVERLAY}\n"
    )

    count = transform_manifest(tmp_path, "chrome.manifest", replacements, log)

    assert count == 1
    assert len(log) == 1
    assert _read(manifest).count(NAVIGATOR_OVERLAY) == 1


def test_non_utf8_bytes_are_preserved(tmp_path, replacements, log):
    comment = "# Überlagerung für Firefox\n".encode("latin-1")
    manifest = tmp_path / "chrome.manifest"
    manifest.write_bytes(comment + f"{BROWSER_OVERLAY}\n".encode())

    count = transform_manifest(tmp_path, "chrome.manifest", replacements, log)

    assert count == 1
    assert manifest.read_bytes() == comment + f"{BROWSER_OVERLAY}\n{NAVIGATOR_OVERLAY}\n".encode()


def test_non_utf8_bytes_in_mirrored_line(tmp_path, replacements, log):
    line = "overlay chrome://browser/content/browser.xul chrome://foo/content/é.xul\n"
    manifest = tmp_path / "chrome.manifest"
    manifest.write_bytes(line.encode("latin-1"))

    assert transform_manifest(tmp_path, "chrome.manifest", replacements, log) == 1

    mirrored = line.replace("browser/content/browser", "navigator/content/navigator")
    assert manifest.read_bytes() == (line + mirrored).encode("latin-1")
    # message stays encodable for reports and console output
    log.messages[0].encode("utf-8")
