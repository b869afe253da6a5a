"""install.rdf compatibility metadata transformation.

Ensures the install manifest record declares the target application with
the requested maxVersion. The document is mutated in place.

Both RDF/XML spellings of a targetApplication entry are understood:

    <em:targetApplication>
      <Description>
        <em:id>{...}</em:id>
        <em:maxVersion>2.*</em:maxVersion>
      </Description>
    </em:targetApplication>

    <em:targetApplication>
      <Description em:id="{...}" em:maxVersion="2.*"/>
    </em:targetApplication>

New entries are always written in the element form.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from xpiport.core.conversion.models import ConversionLog, MetadataResult
from xpiport.core.conversion.profiles import (
    EM_NS,
    INSTALL_MANIFEST_URI,
    INSTALL_RDF,
    RDF_NS,
    SEAMONKEY,
    TargetProfile,
)
from xpiport.core.utils.logging import get_logger

logger = get_logger(__name__)


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        # comments and processing instructions
        return ""
    return tag.rsplit("}", 1)[-1]


def _em(name: str) -> str:
    return f"{{{EM_NS}}}{name}"


def _em_child(parent: ET.Element, name: str) -> ET.Element | None:
    """First child named ``name`` in the em namespace (or unqualified)."""
    for child in parent:
        if child.tag in (_em(name), name):
            return child
    return None


def _em_attribute(elem: ET.Element, name: str) -> str | None:
    value = elem.get(_em(name))
    return value if value is not None else elem.get(name)


def find_install_manifest(root: ET.Element) -> ET.Element | None:
    """Find the Description whose about attribute is the install manifest URI.

    The RDF-namespaced ``about`` attribute is preferred; an unqualified
    ``about`` is accepted as a fallback.
    """
    for elem in root.iter():
        if _local_name(elem.tag) != "Description":
            continue
        about = elem.get(f"{{{RDF_NS}}}about") or elem.get("about")
        if about == INSTALL_MANIFEST_URI:
            return elem
    return None


def _application_id(description: ET.Element) -> str | None:
    id_elem = _em_child(description, "id")
    if id_elem is not None:
        return (id_elem.text or "").strip()
    value = _em_attribute(description, "id")
    return value.strip() if value is not None else None


def _find_target_description(top: ET.Element, app_id: str) -> ET.Element | None:
    for target_app in top:
        if target_app.tag not in (_em("targetApplication"), "targetApplication"):
            continue
        description = next(
            (child for child in target_app if _local_name(child.tag) == "Description"), None
        )
        if description is None:
            continue
        if _application_id(description) == app_id:
            return description
    return None


def _update_max_version(description: ET.Element, max_version: str, log: ConversionLog) -> bool:
    max_elem = _em_child(description, "maxVersion")

    if max_elem is not None:
        current = (max_elem.text or "").strip()
        if current == max_version:
            return False
        max_elem.text = max_version
        log.add(f"{INSTALL_RDF}: Changed maxVersion from '{current}' to '{max_version}'")
        return True

    for attr in (_em("maxVersion"), "maxVersion"):
        current = description.get(attr)
        if current is None:
            continue
        if current.strip() == max_version:
            return False
        description.set(attr, max_version)
        log.add(f"{INSTALL_RDF}: Changed maxVersion from '{current}' to '{max_version}'")
        return True

    ET.SubElement(description, _em("maxVersion")).text = max_version
    log.add(f"{INSTALL_RDF}: Added missing maxVersion")
    return True


def _append_target_application(top: ET.Element, profile: TargetProfile, max_version: str) -> None:
    target_app = ET.SubElement(top, _em("targetApplication"))
    description = ET.SubElement(target_app, _em("Description"))
    ET.SubElement(description, _em("id")).text = profile.app_id
    ET.SubElement(description, _em("minVersion")).text = profile.min_version
    ET.SubElement(description, _em("maxVersion")).text = max_version


def transform_metadata(
    document: ET.ElementTree,
    max_version: str,
    log: ConversionLog,
    profile: TargetProfile = SEAMONKEY,
) -> MetadataResult:
    """Add or update the target application entry in install.rdf.

    Args:
        document: Parsed install.rdf, mutated in place
        max_version: maxVersion to declare for the target application
        log: Receives one message per mutation
        profile: Target application profile

    Returns:
        MetadataResult with the (same) document and whether it changed.
        A document without an install manifest record is reported unchanged.

    Example:
        >>> tree = XMLParser().parse("install.rdf")
        >>> result = transform_metadata(tree, "2.*", ConversionLog())
        >>> result.changed
        True
    """
    root = document.getroot()
    top = find_install_manifest(root) if root is not None else None
    if top is None:
        logger.debug("No install manifest record found; nothing to convert")
        return MetadataResult(changed=False, document=document)

    description = _find_target_description(top, profile.app_id)
    if description is not None:
        changed = _update_max_version(description, max_version, log)
    else:
        _append_target_application(top, profile, max_version)
        log.add(f"{INSTALL_RDF}: Added {profile.name} to list of supported applications")
        changed = True

    return MetadataResult(changed=changed, document=document)
