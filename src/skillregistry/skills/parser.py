"""
Skill parser for skillregistry.

Parses SKILL.md manifests (YAML frontmatter plus a markdown body) into
Skill models wired to the bundle's resource index.
"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from skillregistry.skills.exceptions import (
    ManifestFormatError,
    ManifestValidationError,
    SkillParseError,
)
from skillregistry.skills.indexer import MANIFEST_FILENAME, index_skill_resources
from skillregistry.skills.models import Skill

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LENGTH = 20

BOM = "\ufeff"

_TOOL_NAME_INVALID = re.compile(r"[^A-Za-z0-9_]+")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def strip_leading_html_comment_blocks(content: str) -> str:
    """Remove a UTF-8 BOM and any HTML comment banners before the frontmatter.

    Only comments at the very start of the document are removed, including
    several blocks separated by blank lines. Anything else leaves the text
    untouched.

    Args:
        content: Raw manifest text.

    Returns:
        The text with the leading noise removed.
    """
    if content.startswith(BOM):
        content = content[len(BOM) :]

    remaining = content
    stripped = False
    while True:
        candidate = remaining.lstrip()
        if not candidate.startswith("<!--"):
            break
        end = candidate.find("-->")
        if end == -1:
            break
        remaining = candidate[end + len("-->") :]
        stripped = True

    return remaining.lstrip() if stripped else content


def parse_yaml_frontmatter(content: str, path: Path | None = None) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter from a markdown document.

    Frontmatter is delimited by --- lines at the start of the text.

    Args:
        content: The markdown content, already stripped of leading noise.
        path: Optional path for error messages.

    Returns:
        Tuple of (frontmatter dict, body).

    Raises:
        ManifestFormatError: If there is no frontmatter block or it is not a YAML mapping.
    """
    lines = content.replace("\r\n", "\n").split("\n")

    if not lines or lines[0].strip() != "---":
        raise ManifestFormatError("Missing YAML frontmatter", path)

    end_index = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            end_index = i
            break

    if end_index is None:
        raise ManifestFormatError("Unterminated YAML frontmatter", path)

    frontmatter_text = "\n".join(lines[1:end_index])
    body = "\n".join(lines[end_index + 1 :]).strip()

    try:
        frontmatter = yaml.safe_load(frontmatter_text)
    except yaml.YAMLError as e:
        raise ManifestFormatError(f"Invalid YAML frontmatter: {e}", path) from e

    if not isinstance(frontmatter, dict):
        raise ManifestFormatError("Frontmatter must be a YAML mapping", path)

    return frontmatter, body


def derive_tool_name(name: str) -> str:
    """Derive the callable tool identifier for a skill name.

    Separators and unsupported characters collapse to a single underscore;
    case is preserved. ``foo-bar``, ``foo_bar`` and ``foo bar`` all map to
    ``foo_bar``.
    """
    tool_name = _TOOL_NAME_INVALID.sub("_", name.strip())
    tool_name = _REPEATED_UNDERSCORES.sub("_", tool_name)
    return tool_name.strip("_")


def _parse_allowed_tools(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return [tool for tool in re.split(r"[\s,]+", value) if tool]
    if isinstance(value, list):
        return [str(tool) for tool in value if tool]
    return None


def _parse_metadata(value: Any, path: Path | None) -> dict[str, str] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        logger.warning(f"Ignoring non-mapping 'metadata' in {path}")
        return None
    return {str(k): str(v) for k, v in value.items()}


def _required_field(frontmatter: dict[str, Any], field_name: str, path: Path | None) -> str:
    value = frontmatter.get(field_name)
    if value is None or not str(value).strip():
        raise ManifestValidationError(f"Frontmatter missing required '{field_name}' field", path)
    return str(value).strip()


def parse_skill_manifest(
    content: str,
    skill_dir: Path,
    manifest_path: Path | None = None,
) -> Skill:
    """Parse manifest text into a Skill.

    Args:
        content: Raw SKILL.md text.
        skill_dir: Bundle root directory, indexed for resources.
        manifest_path: Location of the manifest (defaults to ``skill_dir/SKILL.md``).

    Returns:
        Fully parsed Skill model.

    Raises:
        ManifestFormatError: If the frontmatter block is missing or malformed.
        ManifestValidationError: If a required field is missing or too short.
    """
    skill_dir = Path(skill_dir).absolute()
    if manifest_path is None:
        manifest_path = skill_dir / MANIFEST_FILENAME
    manifest_path = Path(manifest_path).absolute()

    frontmatter, body = parse_yaml_frontmatter(
        strip_leading_html_comment_blocks(content), manifest_path
    )

    name = _required_field(frontmatter, "name", manifest_path)
    description = _required_field(frontmatter, "description", manifest_path)

    if len(description) < MIN_DESCRIPTION_LENGTH:
        raise ManifestValidationError(
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters, "
            f"got {len(description)}",
            manifest_path,
        )

    tool_name = derive_tool_name(name)
    if not tool_name:
        raise ManifestValidationError(f"Cannot derive a tool name from '{name}'", manifest_path)

    index = index_skill_resources(skill_dir, manifest_path)

    license_value = frontmatter.get("license")

    return Skill(
        name=name,
        tool_name=tool_name,
        description=description,
        content=body,
        path=manifest_path,
        full_path=skill_dir,
        metadata=_parse_metadata(frontmatter.get("metadata"), manifest_path),
        license=str(license_value) if license_value is not None else None,
        allowed_tools=_parse_allowed_tools(
            frontmatter.get("allowed-tools", frontmatter.get("allowed_tools"))
        ),
        scripts=index.scripts,
        references=index.references,
        assets=index.assets,
        resources=index.resources,
    )


def parse_skill_directory(skill_dir: Path) -> Skill:
    """Parse a skill from its bundle directory.

    Args:
        skill_dir: Path to the bundle (must contain SKILL.md).

    Returns:
        Fully parsed Skill model.

    Raises:
        SkillParseError: If the manifest is missing or unreadable.
        ManifestFormatError: If the frontmatter is missing or malformed.
        ManifestValidationError: If required fields are invalid.
    """
    skill_dir = Path(skill_dir).expanduser().absolute()

    if not skill_dir.is_dir():
        raise SkillParseError("Not a directory", skill_dir)

    manifest_path = skill_dir / MANIFEST_FILENAME
    if not manifest_path.is_file():
        raise SkillParseError(f"Missing required file: {MANIFEST_FILENAME}", skill_dir)

    try:
        content = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SkillParseError(f"Failed to read {MANIFEST_FILENAME}: {e}", manifest_path) from e

    return parse_skill_manifest(content, skill_dir, manifest_path)


def load_skill_from_path(path: Path | str) -> Skill:
    """Load a skill from either its bundle directory or its SKILL.md path."""
    path = Path(path).expanduser()
    if path.name == MANIFEST_FILENAME and not path.is_dir():
        return parse_skill_directory(path.parent)
    return parse_skill_directory(path)
