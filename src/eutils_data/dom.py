"""Document handle and path-query helpers.

E-utility responses are parsed with :mod:`xml.etree.ElementTree` into a single
immutable tree that is owned by one result object for its whole lifetime. The
helpers below give data objects the small query surface they need (find by
path, test existence, read text) without leaking ElementTree details into the
domain classes.

Paths use the ElementTree XPath subset and are always relative to the node
they are applied to (``"DbInfo/FieldList/Field"``, ``".//WebEnv"``).

Example:
        from eutils_data.dom import parse_document, find_text, find_all_text

        root = parse_document(b"<eSearchResult><Count>2</Count>"
                              b"<IdList><Id>1</Id><Id>2</Id></IdList></eSearchResult>")
        find_text(root, "Count")           # '2'
        find_all_text(root, "IdList/Id")   # ['1', '2']
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import IO, Dict, List, Optional, Union

Element = ET.Element

XMLSource = Union[bytes, str, IO]


def parse_document(source: XMLSource) -> ET.Element:
    """Parse a complete XML document and return its root element.

    Args:
        source: Raw document (``bytes`` or ``str``) or a readable stream.

    Returns:
        Root element of the parsed tree.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well formed.
    """
    if hasattr(source, "read"):
        return ET.parse(source).getroot()
    return ET.fromstring(source)


def text_of(node: Optional[ET.Element]) -> Optional[str]:
    """Return the full text content of ``node`` (all descendant text)."""
    if node is None:
        return None
    return "".join(node.itertext())


def exists(node: Optional[ET.Element], path: str) -> bool:
    """Return True if ``path`` matches at least one element below ``node``."""
    if node is None:
        return False
    return node.find(path) is not None


def find_text(node: Optional[ET.Element], path: str) -> Optional[str]:
    """Return the text of the first element matching ``path`` (or None)."""
    if node is None:
        return None
    return text_of(node.find(path))


def find_all_text(node: Optional[ET.Element], path: str) -> List[str]:
    """Return the text of every element matching ``path`` in document order."""
    if node is None:
        return []
    return [text_of(match) or "" for match in node.findall(path)]


def find_all(node: Optional[ET.Element], path: str) -> List[ET.Element]:
    if node is None:
        return []
    return node.findall(path)


def flatten(node: ET.Element) -> Dict[str, str]:
    """Flatten an element into a key/value chunk.

    Attributes are copied first, then the text of every child element that has
    no children of its own. Nested children are skipped; the chunk only holds
    scalar values.

    Example:
        >>> flatten(ET.fromstring('<Field><Name>TITL</Name><IsDate>N</IsDate></Field>'))
        {'Name': 'TITL', 'IsDate': 'N'}
    """
    chunk: Dict[str, str] = dict(node.attrib)
    for child in node:
        if len(child):
            continue
        chunk[child.tag] = (child.text or "").strip()
    return chunk
