"""
Skill exceptions for skillregistry.

Defines the error hierarchy raised while parsing, registering, and
resolving skills.
"""

from pathlib import Path


class SkillError(Exception):
    """Base exception for skill errors."""

    pass


class SkillParseError(SkillError):
    """Error parsing a skill manifest."""

    def __init__(self, message: str, path: Path | str | None = None):
        self.path = Path(path) if path else None
        super().__init__(f"{message}" + (f" (at {path})" if path else ""))


class ManifestFormatError(SkillParseError):
    """The manifest has no frontmatter block, or the block is not valid YAML."""

    pass


class ManifestValidationError(SkillParseError):
    """A required frontmatter field is missing or too short."""

    pass


class AliasCollisionError(SkillError):
    """An alias is already bound to a different skill."""

    def __init__(self, key: str, existing: str, incoming: str):
        self.key = key
        self.existing = existing
        self.incoming = incoming
        super().__init__(
            f"[AliasCollision] alias '{key}' already maps to skill '{existing}', "
            f"refusing to rebind it to '{incoming}'"
        )


class SkillNotFoundError(SkillError):
    """Skill not found in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Skill not found: {name}")


class ResourceNotFoundError(SkillError):
    """No indexed resource matches the request, or the request path is unsafe.

    The message only echoes what the caller supplied.
    """

    def __init__(self, skill_name: str, resource_type: str, relative_path: str):
        self.skill_name = skill_name
        self.resource_type = resource_type
        self.relative_path = relative_path
        super().__init__(
            f'Resource not found: Skill "{skill_name}" does not have a '
            f'{resource_type or "resource"} at path "{relative_path}"'
        )


class ResourceReadError(SkillError):
    """A resource was resolved but reading it failed."""

    def __init__(self, skill_name: str, resource_type: str, relative_path: str, reason: str):
        self.skill_name = skill_name
        self.resource_type = resource_type
        self.relative_path = relative_path
        super().__init__(
            f'Failed to read {resource_type or "resource"} "{relative_path}" '
            f'of skill "{skill_name}": {reason}'
        )


class InitializationError(SkillError):
    """The registry could not be initialised (e.g. no usable base paths)."""

    def __init__(self, message: str, searched_paths: list[Path] | None = None):
        self.searched_paths = searched_paths or []
        paths_str = ", ".join(str(p) for p in self.searched_paths)
        super().__init__(message + (f" (searched: {paths_str})" if paths_str else ""))
