"""XML prompt renderer (the default format)."""

import re
from typing import Any
from xml.sax.saxutils import escape

from skillregistry.renderers.base import PromptRenderer, RenderType, to_plain

_INVALID_TAG_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def _tag(name: str) -> str:
    tag = _INVALID_TAG_CHARS.sub("_", name) or "item"
    if not (tag[0].isalpha() or tag[0] == "_"):
        tag = f"_{tag}"
    return tag


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return escape(str(value))


def json_to_xml(data: Any, root: str = "root", indent: int = 0) -> str:
    """Convert plain data to XML.

    Dict keys become child elements, list items become repeated ``<item>``
    elements, and text is escaped.

    Examples:
        >>> json_to_xml({"name": "a<b"}, "Skill")
        '<Skill>\\n  <name>a&lt;b</name>\\n</Skill>'
    """
    tag = _tag(root)
    pad = "  " * indent

    if isinstance(data, dict):
        if not data:
            return f"{pad}<{tag}></{tag}>"
        children = [json_to_xml(v, k, indent + 1) for k, v in data.items()]
        return f"{pad}<{tag}>\n" + "\n".join(children) + f"\n{pad}</{tag}>"

    if isinstance(data, list):
        if not data:
            return f"{pad}<{tag}></{tag}>"
        children = [json_to_xml(v, "item", indent + 1) for v in data]
        return f"{pad}<{tag}>\n" + "\n".join(children) + f"\n{pad}</{tag}>"

    return f"{pad}<{tag}>{_scalar(data)}</{tag}>"


class XmlPromptRenderer(PromptRenderer):
    """Render payloads as XML with the payload type as root element."""

    @property
    def format(self) -> str:
        return "xml"

    def render(self, data: Any, type: RenderType) -> str:
        return json_to_xml(to_plain(data), type or "root")
