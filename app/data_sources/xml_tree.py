"""
Convert XML documents into plain dict/list/str trees.

The shape mirrors what browser-side XML-to-JSON parsers produce:

- an element with neither attributes nor child elements becomes its text
  (empty string when it has none);
- any other element becomes a dict holding its attributes (namespace
  prefix dropped), its children keyed by local name, and any non-blank
  text under ``"#text"``;
- a child name that occurs once maps to a single value, one that repeats
  maps to a list;
- text and attribute values are stripped, and the text pieces around
  child elements are joined with single spaces.

Because of the single-versus-repeated rule the same field can be a scalar in one document
and a list in another. Callers should pass such fields through
:func:`as_list` once, right after reading them out of the tree.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, List

from app.errors import FeedParseError

TEXT_KEY = "#text"


def _local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element or attribute name."""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def element_to_node(elem: ET.Element) -> Any:
    """Convert one element (recursively) into a tree node.

    Text and attribute values are stripped of surrounding whitespace, so
    pretty-printed documents produce the same tree as compact ones.
    """
    children = list(elem)
    text = (elem.text or "").strip()
    if not elem.attrib and not children:
        return text

    node: dict[str, Any] = {}
    for key, value in elem.attrib.items():
        node[_local_name(key)] = value.strip()

    pieces = [text] + [(child.tail or "").strip() for child in children]
    for child in children:
        name = _local_name(child.tag)
        value = element_to_node(child)
        if name in node:
            existing = node[name]
            if isinstance(existing, list):
                existing.append(value)
            else:
                node[name] = [existing, value]
        else:
            node[name] = value

    mixed_text = " ".join(piece for piece in pieces if piece)
    if mixed_text:
        node[TEXT_KEY] = mixed_text
    return node


def parse_xml(text: str | bytes) -> dict[str, Any]:
    """Parse an XML document into ``{root_local_name: node}``."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise FeedParseError(f"Invalid XML: {exc}") from exc
    return {_local_name(root.tag): element_to_node(root)}


def as_list(value: Any) -> List[Any]:
    """Normalize an absent, single or repeated node to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def node_text(value: Any) -> str | None:
    """Return the text of a plain or mixed-content node, if it has any."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        text = value.get(TEXT_KEY)
        return text if isinstance(text, str) else None
    return None
