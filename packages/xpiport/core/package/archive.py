"""XPI archive handling: extraction, re-packaging and output naming."""

from __future__ import annotations

from pathlib import Path
from zipfile import ZIP_DEFLATED, BadZipFile, ZipFile
import xml.etree.ElementTree as ET

from xpiport.core.conversion.errors import ArchiveError, MetadataError
from xpiport.core.conversion.profiles import EM_NS, INSTALL_RDF, RDF_NS
from xpiport.core.parsers.xml import XMLParser
from xpiport.core.utils.logging import get_logger

logger = get_logger(__name__)

XPI_EXTENSIONS: frozenset[str] = frozenset({".xpi", ".zip", ".jar"})


def extract_archive(source: Path | str, dest_dir: Path | str) -> list[str]:
    """Extract every member of a zip archive into ``dest_dir``.

    Args:
        source: Archive path
        dest_dir: Target directory (created if missing)

    Returns:
        Names of the extracted members

    Raises:
        ArchiveError: If the archive cannot be read or extracted, or a member
            would be written outside ``dest_dir``
    """
    source = Path(source)
    dest_dir = Path(dest_dir)

    if not source.is_file():
        raise ArchiveError("Cannot read the XPI file", path=source)

    dest_dir.mkdir(parents=True, exist_ok=True)
    root = dest_dir.resolve()

    try:
        with ZipFile(source) as archive:
            names = archive.namelist()
            for name in names:
                target = (dest_dir / name).resolve()
                if not target.is_relative_to(root):
                    raise ArchiveError(
                        f"Refusing to extract member outside package: {name}", path=source
                    )
            archive.extractall(dest_dir)
    except BadZipFile as e:
        raise ArchiveError("Cannot read the XPI file", path=source, cause=e) from e
    except OSError as e:
        raise ArchiveError("Cannot extract archive", path=source, cause=e) from e

    logger.debug(f"Extracted {len(names)} members from {source} into {dest_dir}")
    return names


def zip_directory(src_dir: Path | str, dest_file: Path | str) -> Path:
    """Pack the contents of ``src_dir`` (not the directory itself) into a zip.

    Directories are stored as explicit entries so empty folders survive.
    Member names are POSIX paths relative to ``src_dir``, in sorted order.

    Raises:
        ArchiveError: If the archive cannot be written
    """
    src_dir = Path(src_dir)
    dest_file = Path(dest_file)

    if not src_dir.is_dir():
        raise ArchiveError("Source directory does not exist", path=src_dir)

    try:
        dest_file.parent.mkdir(parents=True, exist_ok=True)
        with ZipFile(dest_file, "w", compression=ZIP_DEFLATED) as archive:
            for path in sorted(src_dir.rglob("*")):
                arcname = path.relative_to(src_dir).as_posix()
                if path.is_dir():
                    archive.write(path, arcname + "/")
                else:
                    archive.write(path, arcname)
    except OSError as e:
        raise ArchiveError("Cannot write archive", path=dest_file, cause=e) from e

    logger.debug(f"Packed {src_dir} into {dest_file}")
    return dest_file


def build_output_filename(source: Path | str, suffix: str = "") -> str:
    """Name for the converted package: original stem, optional suffix, original extension.

    Example:
        >>> build_output_filename("/tmp/addon-1.0.xpi")
        'addon-1.0.xpi'
        >>> build_output_filename("/tmp/addon-1.0.xpi", suffix="-sm")
        'addon-1.0-sm.xpi'
    """
    path = Path(source)
    return f"{path.stem}{suffix}{path.suffix}"


def is_xpi_like(path: Path | str) -> bool:
    """Return True when path uses a known package extension."""
    return Path(path).suffix.lower() in XPI_EXTENSIONS


class XpiPackage:
    """An add-on archive together with the directory it was extracted to.

    Example:
        >>> package = XpiPackage.open("addon.xpi", "/tmp/work")
        >>> tree = package.load_install_rdf()
    """

    def __init__(self, source: Path | str, work_dir: Path | str):
        self.source = Path(source)
        self.work_dir = Path(work_dir)
        self._xml = XMLParser(namespaces={"RDF": RDF_NS, "em": EM_NS})

    @classmethod
    def open(cls, source: Path | str, work_dir: Path | str) -> XpiPackage:
        """Extract ``source`` into ``work_dir`` and check it is an add-on.

        Raises:
            ArchiveError: If the archive cannot be read or extracted
            MetadataError: If install.rdf is missing after extraction
        """
        package = cls(source, work_dir)
        extract_archive(package.source, package.work_dir)

        if not package.install_rdf_path.is_file():
            raise MetadataError(f"{INSTALL_RDF} not found in installer", path=package.source)

        return package

    @property
    def install_rdf_path(self) -> Path:
        return self.work_dir / INSTALL_RDF

    def load_install_rdf(self) -> ET.ElementTree:
        """Parse the extracted install.rdf.

        Raises:
            MetadataError: If the file is missing or is not well-formed XML
        """
        try:
            return self._xml.parse(self.install_rdf_path)
        except FileNotFoundError as e:
            raise MetadataError(
                f"{INSTALL_RDF} not found in installer", path=self.source, cause=e
            ) from e
        except ValueError as e:
            raise MetadataError(
                f"Cannot parse {INSTALL_RDF} as XML", path=self.source, cause=e
            ) from e

    def save_install_rdf(self, tree: ET.ElementTree, pretty: bool = True) -> None:
        """Write ``tree`` over the extracted install.rdf."""
        self._xml.write(tree, self.install_rdf_path, pretty=pretty)

    def repack(self, dest_file: Path | str) -> Path:
        """Zip the working directory into ``dest_file``."""
        return zip_directory(self.work_dir, dest_file)
