"""Shared pytest fixtures for xpiport tests."""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path

import pytest

from tests.fixtures.addons import FIREFOX_ID, install_rdf, target_application, write_xpi
from xpiport.core.conversion.models import ConversionLog
from xpiport.core.conversion.profiles import SEAMONKEY

# ============================================================================
# Metadata Fixtures
# ============================================================================


@pytest.fixture
def firefox_install_rdf() -> str:
    """install.rdf declaring Firefox only."""
    return install_rdf(target_application(FIREFOX_ID))


# ============================================================================
# Package Fixtures
# ============================================================================


@pytest.fixture
def make_xpi(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture writing an .xpi into a per-test source directory."""
    source_dir = tmp_path / "src"
    source_dir.mkdir()

    def _make(members: dict[str, str | bytes], name: str = "addon.xpi") -> Path:
        return write_xpi(source_dir / name, members)

    return _make


# ============================================================================
# Conversion Fixtures
# ============================================================================


@pytest.fixture
def log() -> ConversionLog:
    """Fresh conversion log."""
    return ConversionLog()


@pytest.fixture
def replacements() -> tuple[tuple[str, str], ...]:
    """SeaMonkey chrome URI replacement table."""
    return SEAMONKEY.replacements


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by configure_logging after each test."""
    yield
    logging.basicConfig(handlers=[logging.NullHandler()], force=True)
