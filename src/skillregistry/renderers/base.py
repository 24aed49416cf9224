"""Base class and payload preparation for prompt renderers."""

from abc import ABC, abstractmethod
from typing import Any, Literal

from pydantic import BaseModel

from skillregistry.skills.models import Skill, SkillResourceMap

RenderType = Literal["Skill", "SkillResource", "SkillSearchResults"]


def resource_map_to_list(resources: SkillResourceMap | None) -> list[dict[str, str]]:
    """Flatten a resource map into a list of plain records."""
    return [
        {
            "relative_path": relative_path,
            "absolute_path": str(entry.absolute_path),
            "mime_type": entry.mime_type,
        }
        for relative_path, entry in (resources or {}).items()
    ]


def skill_payload(skill: Skill) -> dict[str, Any]:
    """Convert a skill into plain data with its resource maps as lists."""
    data = skill.model_dump(mode="json", exclude={"scripts", "references", "assets", "resources"})
    data["references"] = resource_map_to_list(skill.references)
    data["scripts"] = resource_map_to_list(skill.scripts)
    data["assets"] = resource_map_to_list(skill.assets)
    if skill.resources is not None:
        data["resources"] = resource_map_to_list(skill.resources)
    return data


def to_plain(data: Any) -> Any:
    """Convert models (and skills) nested in a payload into plain data."""
    if isinstance(data, Skill):
        return skill_payload(data)
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", exclude_none=True)
    if isinstance(data, dict):
        return {str(k): to_plain(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_plain(v) for v in data]
    return data


class PromptRenderer(ABC):
    """Formats a payload as text for injection into a model prompt.

    Each renderer handles three payload types: a Skill, a SkillResource
    (file content), and SkillSearchResults.
    """

    @property
    @abstractmethod
    def format(self) -> str:
        """Format identifier (json, xml, or md)."""
        pass

    @abstractmethod
    def render(self, data: Any, type: RenderType) -> str:
        """Render a payload.

        Args:
            data: A Skill, a model, or plain dict/list data.
            type: Payload type, also used as the root element/key.

        Returns:
            Formatted string ready for prompt injection.
        """
        pass
