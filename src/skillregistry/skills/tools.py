"""
Tool-facing entry points for skillregistry.

These functions back the tools a host agent exposes to the model: finding
skills and reading skill resources. Each returns a payload ready for a
prompt renderer.
"""

import logging

from skillregistry.skills.models import ResourceInjection, SkillSearchInjection
from skillregistry.skills.registry import SkillRegistry
from skillregistry.skills.resolver import SkillResourceResolver, normalize_resource_path

logger = logging.getLogger(__name__)


async def find_skills(registry: SkillRegistry, query: str | list[str]) -> SkillSearchInjection:
    """Search the registry and build the search-results payload.

    Args:
        registry: Skill registry (initialised on first use).
        query: Query string or list of strings.

    Returns:
        Payload for rendering as ``SkillSearchResults``.
    """
    await registry.initialise()
    result = registry.search(query)

    return SkillSearchInjection(
        query=query,
        skills=[{"name": s.tool_name, "description": s.description} for s in result.matches],
        summary={
            "total": result.total_skills,
            "matches": result.total_matches,
            "feedback": result.feedback,
        },
        debug=registry.debug if registry.config.debug else None,
    )


class SkillResourceReader:
    """Read a skill resource and build the resource payload.

    Usage:
        reader = SkillResourceReader(registry)
        injection = await reader("my_skill", "references/guide.md")
    """

    def __init__(self, registry: SkillRegistry):
        self.registry = registry
        self.resolver = SkillResourceResolver(registry)

    async def __call__(
        self,
        skill_name: str,
        relative_path: str = "",
        type: str = "",
    ) -> ResourceInjection:
        """Resolve and read a resource.

        Args:
            skill_name: Skill id, tool name, or alias.
            relative_path: Path inside the bundle.
            type: Optional resource type (reference, script, workflow, ...).

        Returns:
            Payload for rendering as ``SkillResource``.
        """
        resolved = await self.resolver.resolve(skill_name, type, relative_path)
        logger.info(f"Loaded resource {relative_path or type!r} from skill '{skill_name}'")

        return ResourceInjection(
            skill_name=skill_name,
            resource_path=normalize_resource_path(relative_path or type),
            resource_mimetype=resolved.mime_type,
            content=resolved.content,
        )
