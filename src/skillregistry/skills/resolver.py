"""
Skill resource resolver for skillregistry.

Resources are indexed when a skill is parsed. The resolver only looks up
entries in those indexes, so a request can never reach a file outside the
bundle. Lookups try a fixed sequence of probes; the first hit wins.
"""

import asyncio
import base64
import logging
import re
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Optional

from skillregistry.skills.exceptions import (
    ResourceNotFoundError,
    ResourceReadError,
    SkillNotFoundError,
)
from skillregistry.skills.models import ResolvedResource, Skill, SkillResource, SkillResourceMap

if TYPE_CHECKING:
    from skillregistry.skills.registry import SkillRegistry

logger = logging.getLogger(__name__)

Probe = Callable[[Skill, str, str], Optional[SkillResource]]

LEGACY_TYPES = {
    "script": "scripts",
    "scripts": "scripts",
    "reference": "references",
    "references": "references",
    "asset": "assets",
    "assets": "assets",
}

GENERIC_TYPES = {"", "resource", "resources", "doc", "docs"}

TEXT_MIME_TYPES = {
    "application/json",
    "application/xml",
    "application/yaml",
    "application/toml",
    "application/javascript",
    "application/typescript",
    "application/x-sh",
    "application/sql",
    "image/svg+xml",
}

_DRIVE_LETTER = re.compile(r"^[A-Za-z]:[\\/]")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def normalize_resource_path(value: str) -> str:
    """Convert a requested path to index-key form.

    Backslashes become forward slashes, repeated slashes collapse, and
    leading/trailing slashes are trimmed. Case is left alone.
    """
    value = _REPEATED_SLASHES.sub("/", value.replace("\\", "/"))
    return value.strip("/")


def is_unsafe_resource_path(value: str) -> bool:
    """Check whether a requested path is empty, absolute, or escapes upward."""
    normalized = normalize_resource_path(value)
    if not normalized:
        return True

    posix = value.replace("\\", "/")
    if posix.startswith("/") or _DRIVE_LETTER.match(value):
        return True

    return ".." in normalized.split("/")


def find_in_map(
    resource_map: SkillResourceMap | None, candidates: Iterable[str]
) -> Optional[SkillResource]:
    """Look up the first candidate key, exact case first, then case-insensitively."""
    if not resource_map:
        return None

    keys = [normalize_resource_path(c) for c in candidates]
    keys = [k for k in keys if k]

    for key in keys:
        entry = resource_map.get(key)
        if entry is not None:
            return entry

    lowered = {k.lower(): v for k, v in resource_map.items()}
    for key in keys:
        entry = lowered.get(key.lower())
        if entry is not None:
            return entry

    return None


def _legacy_candidates(prefix: str, relative_path: str) -> list[str]:
    normalized = normalize_resource_path(relative_path)
    if not normalized:
        return []
    if normalized.lower().startswith(f"{prefix}/"):
        return [normalized]
    return [normalized, f"{prefix}/{normalized}"]


def resolve_legacy(
    skill: Skill, resource_type: str, relative_path: str
) -> Optional[SkillResource]:
    """Look up a path in the scripts/references/assets map named by ``resource_type``."""
    directory = LEGACY_TYPES.get(resource_type.strip().lower())
    if directory is None:
        return None
    return find_in_map(getattr(skill, directory), _legacy_candidates(directory, relative_path))


def resolve_unified(
    skill: Skill, resource_type: str, relative_path: str
) -> Optional[SkillResource]:
    """Look up a path in the unified bundle index using type conventions."""
    if not skill.resources:
        return None

    kind = normalize_resource_path(resource_type)
    relative = normalize_resource_path(relative_path)
    lowered_kind = kind.lower()

    if lowered_kind in ("workflow", "workflows"):
        return find_in_map(
            skill.resources, [relative, f"Workflows/{relative}" if relative else "Workflows"]
        )

    if lowered_kind in ("tool", "tools"):
        return find_in_map(skill.resources, [relative, f"Tools/{relative}" if relative else "Tools"])

    if lowered_kind in GENERIC_TYPES:
        candidates = [relative]
        if not relative.lower().startswith("workflows/"):
            candidates.append(f"Workflows/{relative}")
        if not relative.lower().startswith("tools/"):
            candidates.append(f"Tools/{relative}")
        return find_in_map(skill.resources, candidates)

    # e.g. type=SYSTEM, relative_path=ARCHITECTURE.md
    typed = f"{kind}/{relative}" if relative else kind
    return find_in_map(skill.resources, [typed, relative])


def _infer_legacy_type(relative_path: str) -> Optional[str]:
    lowered = normalize_resource_path(relative_path).lower()
    for directory in ("references", "scripts", "assets"):
        if lowered.startswith(f"{directory}/"):
            return directory
    return None


def resolve_by_path_prefix(
    skill: Skill, resource_type: str, relative_path: str
) -> Optional[SkillResource]:
    """Retry the legacy maps when the path itself starts with a legacy directory.

    Generic types additionally sweep references, scripts, then assets.
    """
    if not relative_path:
        return None

    inferred = _infer_legacy_type(relative_path)
    if inferred is not None:
        entry = resolve_legacy(skill, inferred, relative_path)
        if entry is not None:
            return entry

    if resource_type.strip().lower() in GENERIC_TYPES:
        for directory in ("references", "scripts", "assets"):
            entry = resolve_legacy(skill, directory, relative_path)
            if entry is not None:
                return entry

    return None


def resolve_type_as_path(
    skill: Skill, resource_type: str, relative_path: str
) -> Optional[SkillResource]:
    """Treat the type argument as the path when no relative path was given."""
    if relative_path:
        return None

    entry = resolve_unified(skill, "resource", resource_type)
    if entry is not None:
        return entry

    for directory in ("references", "scripts", "assets"):
        entry = resolve_legacy(skill, directory, resource_type)
        if entry is not None:
            return entry

    return None


DEFAULT_PROBES: tuple[Probe, ...] = (
    resolve_legacy,
    resolve_unified,
    resolve_by_path_prefix,
    resolve_type_as_path,
)


def find_resource(
    skill: Skill,
    resource_type: str,
    relative_path: str,
    probes: Iterable[Probe] = DEFAULT_PROBES,
) -> SkillResource:
    """Locate an indexed resource in a skill.

    Args:
        skill: The skill to search.
        resource_type: Requested type (script, reference, asset, workflow, tool, resource, ...).
        relative_path: Requested path inside the bundle (may be empty).
        probes: Lookup strategies, tried in order.

    Returns:
        The indexed resource entry.

    Raises:
        ResourceNotFoundError: If the path is unsafe or nothing matches.
    """
    lookup_path = relative_path or resource_type
    unsafe_type = ".." in normalize_resource_path(resource_type).split("/")
    if unsafe_type or is_unsafe_resource_path(lookup_path):
        logger.warning(f"Rejected unsafe resource path for skill '{skill.name}': {lookup_path!r}")
        raise ResourceNotFoundError(skill.name, resource_type, relative_path)

    for probe in probes:
        entry = probe(skill, resource_type, relative_path)
        if entry is not None:
            return entry

    raise ResourceNotFoundError(skill.name, resource_type, relative_path)


def _decode(data: bytes, mime_type: str) -> tuple[str, str]:
    is_text_type = mime_type.startswith("text/") or mime_type in TEXT_MIME_TYPES
    try:
        return data.decode("utf-8"), "text"
    except UnicodeDecodeError:
        if is_text_type:
            return data.decode("utf-8", errors="replace"), "text"
        return base64.b64encode(data).decode("ascii"), "base64"


class SkillResourceResolver:
    """Resolve and read resources of registered skills.

    Requests wait for the registry to finish initialising.
    """

    def __init__(self, registry: "SkillRegistry", probes: Iterable[Probe] = DEFAULT_PROBES):
        self.registry = registry
        self.probes = tuple(probes)

    async def resolve(
        self,
        skill_name: str,
        resource_type: str = "",
        relative_path: str = "",
    ) -> ResolvedResource:
        """Resolve a resource request and read the file.

        Args:
            skill_name: Skill id, tool name, or alias.
            resource_type: Requested type; empty means a generic resource.
            relative_path: Path inside the bundle.

        Returns:
            The resource path, content, and MIME type.

        Raises:
            SkillNotFoundError: If the skill is not registered.
            ResourceNotFoundError: If the path is unsafe or not indexed.
            ResourceReadError: If the file was indexed but cannot be read.
        """
        await self.registry.initialise()

        skill = self.registry.controller.get(skill_name)
        if skill is None:
            raise SkillNotFoundError(skill_name)

        resource_type = resource_type or ""
        relative_path = relative_path or ""
        entry = find_resource(skill, resource_type, relative_path, self.probes)

        try:
            data = await asyncio.to_thread(entry.absolute_path.read_bytes)
        except OSError as e:
            raise ResourceReadError(
                skill_name, resource_type, relative_path, e.strerror or type(e).__name__
            ) from e

        content, encoding = _decode(data, entry.mime_type)
        logger.debug(f"Read {len(data)} bytes from skill '{skill.name}' ({entry.mime_type})")

        return ResolvedResource(
            absolute_path=entry.absolute_path,
            content=content,
            mime_type=entry.mime_type,
            encoding=encoding,
        )
