"""
Prompt renderers for skillregistry.

Renderers format skills, resources, and search results for injection into
a model prompt. The format is chosen per model, falling back to the
configured default.

Usage:
    from skillregistry.renderers import get_renderer

    renderer = get_renderer(config, model_id="anthropic/claude-sonnet")
    text = renderer.render(skill, "Skill")
"""

from skillregistry.config.schema import RegistryConfig
from skillregistry.renderers.base import (
    PromptRenderer,
    RenderType,
    resource_map_to_list,
    skill_payload,
)
from skillregistry.renderers.json_renderer import JsonPromptRenderer
from skillregistry.renderers.md_renderer import MdPromptRenderer
from skillregistry.renderers.xml_renderer import XmlPromptRenderer, json_to_xml

RENDERERS: dict[str, type[PromptRenderer]] = {
    "json": JsonPromptRenderer,
    "xml": XmlPromptRenderer,
    "md": MdPromptRenderer,
}


def create_renderer(format: str) -> PromptRenderer:
    """Create a renderer for a format identifier.

    Raises:
        ValueError: If the format is unknown.
    """
    try:
        return RENDERERS[format]()
    except KeyError:
        raise ValueError(f"Unknown prompt renderer: {format}") from None


def get_renderer(config: RegistryConfig, model_id: str | None = None) -> PromptRenderer:
    """Select the renderer for a model, falling back to the configured default."""
    if model_id and model_id in config.model_renderers:
        return create_renderer(config.model_renderers[model_id])
    return create_renderer(config.prompt_renderer)


__all__ = [
    "JsonPromptRenderer",
    "MdPromptRenderer",
    "PromptRenderer",
    "RENDERERS",
    "RenderType",
    "XmlPromptRenderer",
    "create_renderer",
    "get_renderer",
    "json_to_xml",
    "resource_map_to_list",
    "skill_payload",
]
