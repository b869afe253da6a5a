"""Conversion orchestrator.

Owns one extracted package and its install.rdf document for the duration of
a conversion, runs the metadata and manifest transformers, and re-packages
the working directory only when something changed.
"""

from __future__ import annotations

from pathlib import Path
import tempfile

from xpiport.core.conversion.errors import ArchiveError
from xpiport.core.conversion.manifest import transform_manifest
from xpiport.core.conversion.metadata import transform_metadata
from xpiport.core.conversion.models import ConversionLog, ConversionResult
from xpiport.core.conversion.profiles import CHROME_MANIFEST, SEAMONKEY, TargetProfile
from xpiport.core.package.archive import XpiPackage, build_output_filename
from xpiport.core.utils.logging import get_logger

logger = get_logger(__name__)


class AddonConverter:
    """Converts one extracted add-on package for a target application.

    The converter loads install.rdf when it is created, so construction fails
    fast on broken input. Each call to :meth:`convert` returns its own log of
    mutations; nothing is shared between converters.

    Example:
        >>> package = XpiPackage.open("addon.xpi", "/tmp/work")
        >>> converter = AddonConverter(package)
        >>> result = converter.convert("out", "2.*")
        >>> result.output_path
        PosixPath('out/addon.xpi')
    """

    def __init__(
        self,
        package: XpiPackage,
        profile: TargetProfile = SEAMONKEY,
        *,
        filename_suffix: str = "",
        pretty_xml: bool = True,
    ):
        """Initialize converter.

        Args:
            package: Extracted package to convert
            profile: Target application profile
            filename_suffix: Inserted between stem and extension of the output file
            pretty_xml: Re-indent install.rdf when writing it back

        Raises:
            MetadataError: If install.rdf is missing or malformed
        """
        self.package = package
        self.profile = profile
        self.filename_suffix = filename_suffix
        self.pretty_xml = pretty_xml
        self.install_rdf = package.load_install_rdf()

    def convert(self, dest_dir: Path | str, max_version: str) -> ConversionResult:
        """Run the conversion.

        Args:
            dest_dir: Directory to write the converted package to
            max_version: maxVersion to declare for the target application

        Returns:
            ConversionResult; ``output_path`` is None when no conversion was
            necessary and no file was produced

        Raises:
            ArchiveError: If the converted package cannot be written
            OSError: If install.rdf or a manifest cannot be written back
        """
        log = ConversionLog()

        metadata = transform_metadata(self.install_rdf, max_version, log, self.profile)
        if metadata.changed:
            self.package.save_install_rdf(metadata.document, pretty=self.pretty_xml)

        manifests_changed = transform_manifest(
            self.package.work_dir, CHROME_MANIFEST, self.profile.replacements, log
        )

        output_path: Path | None = None
        if metadata.changed or manifests_changed > 0:
            filename = build_output_filename(self.package.source, self.filename_suffix)
            dest_file = Path(dest_dir) / filename
            if dest_file.resolve() == self.package.source.resolve():
                raise ArchiveError("Output would overwrite the source package", path=dest_file)
            output_path = self.package.repack(dest_file)
            logger.info(f"Converted {self.package.source.name} -> {output_path}")
        else:
            logger.info(f"No conversion necessary for {self.package.source.name}")

        return ConversionResult(
            source=self.package.source,
            output_path=output_path,
            metadata_changed=metadata.changed,
            manifests_changed=manifests_changed,
            messages=log.messages,
        )


def convert_xpi(
    source: Path | str,
    dest_dir: Path | str,
    max_version: str,
    profile: TargetProfile = SEAMONKEY,
    *,
    filename_suffix: str = "",
    pretty_xml: bool = True,
    work_root: Path | str | None = None,
) -> ConversionResult:
    """Extract, convert and re-package a single add-on.

    A fresh temporary working directory is created for the package and
    removed afterwards, whether the conversion succeeds or not.

    Args:
        source: Path to the .xpi file
        dest_dir: Directory for the converted package
        max_version: maxVersion to declare for the target application
        profile: Target application profile
        filename_suffix: Inserted between stem and extension of the output file
        pretty_xml: Re-indent install.rdf when writing it back
        work_root: Parent for the temporary working directory (system default if None)

    Raises:
        ConversionError: On unreadable archives or broken install.rdf
    """
    with tempfile.TemporaryDirectory(prefix="xpiport-", dir=work_root) as work_dir:
        package = XpiPackage.open(source, Path(work_dir) / "extracted")
        converter = AddonConverter(
            package, profile, filename_suffix=filename_suffix, pretty_xml=pretty_xml
        )
        return converter.convert(dest_dir, max_version)
