"""Target application profiles.

A profile bundles everything that is specific to the application an add-on
is being converted for: its GUID, the lowest release it supports and the
chrome URIs that must be mirrored from Firefox paths. Keeping this as data
lets the transformers stay application-agnostic.
"""

from __future__ import annotations

from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

INSTALL_RDF = "install.rdf"
CHROME_MANIFEST = "chrome.manifest"
INSTALL_MANIFEST_URI = "urn:mozilla:install-manifest"

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
EM_NS = "http://www.mozilla.org/2004/em-rdf#"


class ProfileNotFoundError(KeyError):
    """Raised when a profile name is not registered."""


class TargetProfile(BaseModel):
    """Immutable description of a conversion target application.

    Attributes:
        name: Display name used in log messages
        app_id: Application GUID written to targetApplication/id
        min_version: minVersion used when a new entry is created
        replacements: Ordered (source, target) chrome URI pairs
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(description="Display name of the application")
    app_id: str = Field(description="Application GUID")
    min_version: str = Field(description="Lowest supported application release")
    replacements: tuple[tuple[str, str], ...] = Field(
        default=(), description="Chrome URI replacement table"
    )


SEAMONKEY = TargetProfile(
    name="SeaMonkey",
    app_id="{92650c4d-4b8e-4d2a-b7eb-24ecf4f6b63a}",
    min_version="2.0",
    replacements=(
        (
            "chrome://browser/content/browser.xul",
            "chrome://navigator/content/navigator.xul",
        ),
        (
            "chrome://browser/content/pageinfo/pageInfo.xul",
            "chrome://navigator/content/pageinfo/pageInfo.xul",
        ),
        (
            "chrome://browser/content/preferences/permissions.xul",
            "chrome://communicator/content/permissions/permissionsManager.xul",
        ),
        (
            "chrome://browser/content/bookmarks/bookmarksPanel.xul",
            "chrome://communicator/content/bookmarks/bm-panel.xul",
        ),
        (
            "chrome://browser/content/places/places.xul",
            "chrome://communicator/content/bookmarks/bookmarksManager.xul",
        ),
    ),
)

_PROFILES: MappingProxyType[str, TargetProfile] = MappingProxyType({"seamonkey": SEAMONKEY})


def get_profile(name: str) -> TargetProfile:
    """Look up a registered profile by (case-insensitive) name.

    Raises:
        ProfileNotFoundError: If no profile has that name
    """
    try:
        return _PROFILES[name.lower()]
    except KeyError:
        available = ", ".join(sorted(_PROFILES))
        raise ProfileNotFoundError(f"Unknown profile '{name}' (available: {available})") from None


def list_profiles() -> list[str]:
    """Return registered profile names, sorted."""
    return sorted(_PROFILES)
