"""
Generic XML -> tree conversion.

Elements become either a trimmed string (no attributes, no child elements) or a
dict holding "@attr" keys, child elements by qualified name ("soap:Body") and a
"#text" entry for mixed content. Repeated children collapse into a list.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import CData, NavigableString, Tag

Node = Union[str, Dict[str, Any], List[Any]]

TEXT_KEY = "#text"

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)


def qualified_name(tag: Tag) -> str:
    if tag.prefix and ":" not in tag.name:
        return f"{tag.prefix}:{tag.name}"
    return tag.name


def local_name(key: str) -> str:
    return key.rsplit(":", 1)[-1]


def _convert(tag: Tag) -> Node:
    children: Dict[str, Any] = {}
    text_parts: List[str] = []

    for child in tag.children:
        if isinstance(child, Tag):
            key = qualified_name(child)
            value = _convert(child)
            if key not in children:
                children[key] = value
            elif isinstance(children[key], list):
                children[key].append(value)
            else:
                children[key] = [children[key], value]
        elif type(child) in (NavigableString, CData):
            text_parts.append(str(child))

    text = "".join(text_parts).strip()
    attributes = {
        f"@{name}": " ".join(value) if isinstance(value, list) else str(value).strip()
        for name, value in (tag.attrs or {}).items()
    }
    if not children and not attributes:
        return text

    node: Dict[str, Any] = dict(attributes)
    node.update(children)
    if text:
        node[TEXT_KEY] = text
    return node


def parse_xml(markup: str) -> Dict[str, Any]:
    """Parse a whole XML document into a dict keyed by its root element name."""
    soup = BeautifulSoup(markup or "", "xml")
    tree = _convert(soup)
    return tree if isinstance(tree, dict) else {}


def parse_fragment(markup: str) -> Dict[str, Any]:
    """Parse markup that may carry several top-level elements."""
    body = _XML_DECLARATION.sub("", markup or "", count=1)
    wrapped = parse_xml(f"<fragment>{body}</fragment>")
    fragment = wrapped.get("fragment")
    return fragment if isinstance(fragment, dict) else {}


def find_first(node: Optional[Node], candidates: Iterable[str], local: Optional[str] = None) -> Optional[Node]:
    """
    Look up the first candidate key present on a dict node.

    When none of the candidates match and `local` is given, any key whose local
    name (prefix stripped) equals it is accepted.
    """
    if not isinstance(node, dict):
        return None
    for key in candidates:
        if key in node:
            return node[key]
    if local:
        for key, value in node.items():
            if not key.startswith("@") and local_name(key) == local:
                return value
    return None


def as_list(node: Optional[Node]) -> List[Any]:
    if node is None:
        return []
    if isinstance(node, list):
        return node
    return [node]


def text_of(node: Optional[Node]) -> str:
    """Reduce a Text or Element node to its string content."""
    if node is None:
        return ""
    if isinstance(node, list):
        return text_of(node[0]) if node else ""
    if isinstance(node, dict):
        value = node.get(TEXT_KEY, "")
        return value if isinstance(value, str) else ""
    return str(node)


def child_text(node: Optional[Node], key: str) -> str:
    if not isinstance(node, dict):
        return ""
    return text_of(node.get(key)).strip()
