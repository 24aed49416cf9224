"""Markdown prompt renderer."""

import html
import re
from typing import Any

from skillregistry.renderers.base import PromptRenderer, RenderType, to_plain
from skillregistry.skills.models import Skill


def _escape(value: Any) -> str:
    if value is None:
        return "_none_"
    if isinstance(value, bool):
        return "true" if value else "false"
    return html.escape(str(value), quote=False)


def _fence(content: str) -> str:
    longest = max((len(m) for m in re.findall(r"`{3,}", content)), default=2)
    fence = "`" * (longest + 1)
    return f"{fence}\n{content}\n{fence}"


def _bullets(data: Any, depth: int = 0) -> list[str]:
    pad = "  " * depth
    lines: list[str] = []
    if isinstance(data, dict):
        for key, value in data.items():
            if isinstance(value, (dict, list)) and value:
                lines.append(f"{pad}- **{_escape(key)}**:")
                lines.extend(_bullets(value, depth + 1))
            else:
                lines.append(f"{pad}- **{_escape(key)}**: {_escape(value)}")
    elif isinstance(data, list):
        for value in data:
            if isinstance(value, (dict, list)) and value:
                lines.append(f"{pad}-")
                lines.extend(_bullets(value, depth + 1))
            else:
                lines.append(f"{pad}- {_escape(value)}")
    else:
        lines.append(f"{pad}- {_escape(data)}")
    return lines


def _resource_section(title: str, resources: list[dict[str, str]]) -> list[str]:
    lines = [f"## {title}", ""]
    if not resources:
        lines.append("_None_")
    for entry in resources:
        lines.append(f"- `{entry['relative_path']}` ({entry['mime_type']})")
    lines.append("")
    return lines


class MdPromptRenderer(PromptRenderer):
    """Render payloads as readable markdown."""

    @property
    def format(self) -> str:
        return "md"

    def render(self, data: Any, type: RenderType) -> str:
        if type == "Skill":
            return self._render_skill(data)
        if type == "SkillResource":
            return self._render_resource(to_plain(data))
        return "\n".join([f"# {type}", ""] + _bullets(to_plain(data)))

    def _render_skill(self, data: Skill | dict[str, Any]) -> str:
        skill = to_plain(data)
        lines = [f"# {_escape(skill.get('name'))}", "", _escape(skill.get("description")), ""]

        lines.extend(["## Metadata", ""])
        meta = {
            "tool_name": skill.get("tool_name"),
            "license": skill.get("license"),
            "allowed_tools": skill.get("allowed_tools"),
            "path": skill.get("path"),
        }
        meta.update(skill.get("metadata") or {})
        lines.extend(_bullets({k: v for k, v in meta.items() if v is not None}))
        lines.append("")

        lines.extend(_resource_section("References", skill.get("references", [])))
        lines.extend(_resource_section("Scripts", skill.get("scripts", [])))
        lines.extend(_resource_section("Assets", skill.get("assets", [])))
        if skill.get("resources"):
            lines.extend(_resource_section("Resources", skill["resources"]))

        lines.extend(["## Content", "", skill.get("content", "")])
        return "\n".join(lines)

    def _render_resource(self, data: dict[str, Any]) -> str:
        header = {k: v for k, v in data.items() if k != "content"}
        lines = ["# SkillResource", ""] + _bullets(header)
        lines.extend(["", "## Content", "", _fence(str(data.get("content", "")))])
        return "\n".join(lines)
