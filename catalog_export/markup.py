"""Markup encoding helpers (lxml)."""

from __future__ import annotations

import re
from typing import Optional

from lxml import etree

# Characters XML 1.0 does not allow in text nodes.
_INVALID_XML_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def xml_text(text: str) -> str:
    return _INVALID_XML_CHARS_RE.sub("", text)


def root_element(tag: str, version: Optional[str] = None) -> etree._Element:
    """Document root carrying the caller's ``Version`` marker."""
    root = etree.Element(tag)
    if version:
        root.set("Version", version)
    return root


def to_bytes(root: etree._Element, *, pretty: bool = True) -> bytes:
    """Serialize a document root to UTF-8 bytes with an XML declaration."""
    return etree.tostring(
        root,
        xml_declaration=True,
        encoding="utf-8",
        pretty_print=pretty,
    )


def to_string(root: etree._Element, *, pretty: bool = True) -> str:
    return to_bytes(root, pretty=pretty).decode("utf-8")
