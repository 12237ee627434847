"""Namespace-agnostic helpers for the XML based parsers."""

from typing import Iterator, Optional
from xml.etree.ElementTree import Element

from defusedxml import ElementTree as SafeElementTree

from ..loaders import MAX_CONTENT_SIZE


def parse_xml(content: str) -> Optional[Element]:
    """Parse an XML document with DTDs, entities and external references forbidden.

    Raises:
        defusedxml.DefusedXmlException: If the document declares a DTD or entities
        xml.etree.ElementTree.ParseError: If the document is not well formed
    """
    if len(content) > MAX_CONTENT_SIZE:
        return None
    return SafeElementTree.fromstring(content, forbid_dtd=True, forbid_entities=True, forbid_external=True)


def local_name(tag: str) -> str:
    """Drop the ``{namespace}`` prefix ElementTree puts on qualified tags."""
    # Comments and processing instructions have callable tags
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def children(element: Optional[Element], name: str) -> Iterator[Element]:
    if element is None:
        return
    for node in element:
        if local_name(node.tag) == name:
            yield node


def child(element: Optional[Element], name: str) -> Optional[Element]:
    return next(children(element, name), None)


def child_text(element: Optional[Element], name: str) -> Optional[str]:
    node = child(element, name)
    if node is None or node.text is None:
        return None
    return node.text.strip() or None
