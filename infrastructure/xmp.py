"""Flatten an XMP packet into ``prefix:Name`` property paths.

Paths follow the XMP toolkit conventions: top-level simple properties are
``ns:Name``, array items are ``ns:Name[1]``, and struct fields are
``ns:Name/ns:Field``. Prefixes are taken from the packet's own namespace
declarations, falling back to the customary prefix for well-known URIs.
"""

from __future__ import annotations

import io
import xml.etree.ElementTree as ET

from loguru import logger

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
_RDF = "{" + RDF_NS + "}"
_XML = "{http://www.w3.org/XML/1998/namespace}"
_ARRAY_TAGS = {_RDF + "Alt", _RDF + "Seq", _RDF + "Bag"}

WELL_KNOWN_PREFIXES = {
    "http://ns.adobe.com/xap/1.0/": "xmp",
    "http://ns.adobe.com/xap/1.0/mm/": "xmpMM",
    "http://ns.adobe.com/photoshop/1.0/": "photoshop",
    "http://purl.org/dc/elements/1.1/": "dc",
    "http://ns.adobe.com/exif/1.0/": "exif",
    "http://ns.adobe.com/tiff/1.0/": "tiff",
    "http://iptc.org/std/Iptc4xmpCore/1.0/xmlns/": "Iptc4xmpCore",
    "http://iptc.org/std/Iptc4xmpExt/2008-02-29/": "Iptc4xmpExt",
    "http://www.w3.org/XML/1998/namespace": "xml",
}


def parse_xmp_properties(packet: bytes | str) -> dict[str, str] | None:
    """Return the property paths of `packet`, or None when it is not valid XMP."""
    data = packet.encode("utf-8") if isinstance(packet, str) else bytes(packet)
    data = data.strip(b"\x00 \t\r\n")
    if not data:
        return None
    try:
        prefixes = _declared_prefixes(data)
        root = ET.fromstring(data)
    except ET.ParseError as ex:
        logger.debug("XMP parse failed: {}", ex)
        return None

    properties: dict[str, str] = {}
    for rdf in root.iter(_RDF + "RDF"):
        for description in rdf.findall(_RDF + "Description"):
            _collect_description(description, prefixes, properties)
    return properties


def _collect_description(
    description: ET.Element, prefixes: dict[str, str], properties: dict[str, str]
) -> None:
    for name, value in description.attrib.items():
        if name.startswith(_RDF):
            continue
        properties[_qualified(name, prefixes)] = value
    for child in description:
        _collect(child, _qualified(child.tag, prefixes), prefixes, properties)


def _declared_prefixes(data: bytes) -> dict[str, str]:
    prefixes = dict(WELL_KNOWN_PREFIXES)
    declared: dict[str, str] = {}
    for _event, (prefix, uri) in ET.iterparse(io.BytesIO(data), events=("start-ns",)):
        if prefix and uri not in declared:
            declared[uri] = prefix
    prefixes.update(declared)
    return prefixes


def _qualified(tag: str, prefixes: dict[str, str]) -> str:
    if not tag.startswith("{"):
        return tag
    uri, _, local = tag[1:].partition("}")
    prefix = prefixes.get(uri)
    return f"{prefix}:{local}" if prefix else local


def _collect(
    element: ET.Element, path: str, prefixes: dict[str, str], out: dict[str, str]
) -> None:
    resource = element.attrib.get(_RDF + "resource")
    if resource is not None:
        out[path] = resource
        return

    children = list(element)
    if not children:
        fields = {k: v for k, v in element.attrib.items() if not k.startswith(_RDF) and "}" in k}
        fields.pop(_XML + "lang", None)
        if fields and element.attrib.get(_RDF + "parseType") != "Literal":
            for name, value in fields.items():
                out[f"{path}/{_qualified(name, prefixes)}"] = value
            return
        out[path] = element.text or ""
        return

    first = children[0]
    if len(children) == 1 and first.tag in _ARRAY_TAGS:
        for index, item in enumerate(first.findall(_RDF + "li"), start=1):
            _collect(item, f"{path}[{index}]", prefixes, out)
        return

    # Struct: either an explicit rdf:Description or the parseType="Resource" shorthand
    fields_parent = first if len(children) == 1 and first.tag == _RDF + "Description" else element
    for name, value in fields_parent.attrib.items():
        if name.startswith(_RDF) or name.startswith(_XML):
            continue
        out[f"{path}/{_qualified(name, prefixes)}"] = value
    for child in fields_parent:
        _collect(child, f"{path}/{_qualified(child.tag, prefixes)}", prefixes, out)
