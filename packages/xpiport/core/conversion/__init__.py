"""Add-on conversion pipeline.

The orchestrator lives in :mod:`xpiport.core.conversion.converter`; import it
from there.
"""

from xpiport.core.conversion.errors import ArchiveError, ConversionError, MetadataError
from xpiport.core.conversion.manifest import transform_manifest
from xpiport.core.conversion.metadata import find_install_manifest, transform_metadata
from xpiport.core.conversion.models import ConversionLog, ConversionResult, MetadataResult
from xpiport.core.conversion.profiles import (
    SEAMONKEY,
    ProfileNotFoundError,
    TargetProfile,
    get_profile,
    list_profiles,
)
from xpiport.core.conversion.rewriter import rewrite_manifest_line

__all__ = [
    # Errors
    "ConversionError",
    "ArchiveError",
    "MetadataError",
    "ProfileNotFoundError",
    # Profiles
    "TargetProfile",
    "SEAMONKEY",
    "get_profile",
    "list_profiles",
    # Results
    "ConversionLog",
    "ConversionResult",
    "MetadataResult",
    # Transformers
    "rewrite_manifest_line",
    "transform_manifest",
    "transform_metadata",
    "find_install_manifest",
]
