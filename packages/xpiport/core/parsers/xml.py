"""XML load/save helpers.

Wraps ElementTree with consistent error handling. Namespace prefixes passed
to the parser are registered so that rewritten documents keep their
familiar prefixes (``RDF:``, ``em:``) instead of ``ns0:``. Comments inside the
root element survive a load/save round trip.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
import xml.etree.ElementTree as ET

from xpiport.core.utils.logging import get_logger

logger = get_logger(__name__)


class XMLParser:
    """XML parser/writer with error handling.

    Example:
        >>> parser = XMLParser(namespaces={"em": "http://www.mozilla.org/2004/em-rdf#"})
        >>> tree = parser.parse("install.rdf")
        >>> parser.write(tree, "install.rdf")
    """

    def __init__(self, namespaces: Mapping[str, str] | None = None):
        """Initialize parser.

        Args:
            namespaces: prefix -> URI pairs to use when serializing
        """
        self.namespaces = dict(namespaces or {})
        for prefix, uri in self.namespaces.items():
            ET.register_namespace(prefix, uri)

    def _new_parser(self) -> ET.XMLParser:
        """Parser that keeps comments in the tree."""
        return ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))

    def parse(self, file_path: Path | str) -> ET.ElementTree:
        """Parse XML file.

        Args:
            file_path: Path to XML file

        Returns:
            Parsed ElementTree

        Raises:
            FileNotFoundError: If file does not exist
            ValueError: If XML is malformed
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"XML file does not exist: {path}")

        try:
            logger.debug(f"Parsing XML file: {path}")
            return ET.parse(path, parser=self._new_parser())
        except ET.ParseError as e:
            raise ValueError(f"Malformed XML in {path}: {e}") from e

    def parse_string(self, xml_str: str | bytes) -> ET.ElementTree:
        """Parse XML from a string.

        Raises:
            ValueError: If XML is malformed
        """
        try:
            return ET.ElementTree(ET.fromstring(xml_str, parser=self._new_parser()))
        except ET.ParseError as e:
            raise ValueError(f"Malformed XML string: {e}") from e

    def write(self, tree: ET.ElementTree, file_path: Path | str, pretty: bool = True) -> None:
        """Write tree to file as UTF-8 with an XML declaration.

        Args:
            tree: Tree to serialize
            file_path: Destination path
            pretty: Re-indent the whole document with two spaces
        """
        file_path = Path(file_path)

        if pretty:
            ET.indent(tree, space="  ", level=0)

        tree.write(str(file_path), encoding="UTF-8", xml_declaration=True)
        logger.debug(f"Wrote XML file: {file_path}")

    def to_string(self, tree: ET.ElementTree) -> str:
        """Serialize tree to a unicode string (no declaration)."""
        root = tree.getroot()
        if root is None:
            raise ValueError("XML tree has no root element")
        return ET.tostring(root, encoding="unicode")
