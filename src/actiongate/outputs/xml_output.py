"""XML renderer built on ElementTree."""

from __future__ import annotations

import re
from typing import Any
from xml.etree import ElementTree as ET

from actiongate.errors import RenderingError
from actiongate.outputs.base import Output

_TAG_RE = re.compile(r"^[A-Za-z_][\w.-]*$")
# Characters outside the XML 1.0 Char production
_ILLEGAL_XML_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _checked(text: str) -> str:
    match = _ILLEGAL_XML_RE.search(text)
    if match:
        raise RenderingError(
            message=f"Cannot encode character U+{ord(match.group()):04X} as XML"
        )
    return text


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _append(parent: ET.Element, key: Any, value: Any) -> None:
    """Append *value* under *parent* as an element named after *key*."""
    key = str(key)
    if _TAG_RE.match(key) and not key.lower().startswith("xml"):
        node = ET.SubElement(parent, key)
    else:
        node = ET.SubElement(parent, "item", {"key": _checked(key)})
    _fill(node, value)


def _fill(node: ET.Element, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, dict):
        for k, v in value.items():
            _append(node, k, v)
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            _append(node, "item", item)
    else:
        node.text = _checked(_scalar_text(value))


class XMLOutput(Output):
    """Renders data under a ``<response>`` root; lists become ``<item>`` runs."""

    format_id = "xml"
    default_mime_type = "application/xml"
    mime_types = frozenset({"application/xml", "text/xml"})

    def execute_output(self) -> str:
        root = ET.Element("response")
        try:
            _fill(root, self.data)
            body = ET.tostring(root, encoding="unicode")
        except (TypeError, ValueError) as e:
            raise RenderingError(message=f"Cannot encode response as XML: {e}") from e
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'
