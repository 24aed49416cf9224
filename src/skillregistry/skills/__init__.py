"""
Skill registry and resource resolver.

A skill bundle is a directory holding a SKILL.md manifest (YAML
frontmatter plus markdown instructions) and any supporting files:
- scripts/, references/, assets/: the fixed resource directories
- any other files (Workflows/, Tools/, root docs): the unified resource tree

Usage:
    from skillregistry.skills import SkillRegistry, SkillResourceResolver

    registry = SkillRegistry(config)
    await registry.initialise()

    results = registry.search("auth -oauth")
    resource = await SkillResourceResolver(registry).resolve(
        "my_skill", "reference", "guide.md"
    )
"""

# Exceptions
from skillregistry.skills.exceptions import (
    AliasCollisionError,
    InitializationError,
    ManifestFormatError,
    ManifestValidationError,
    ResourceNotFoundError,
    ResourceReadError,
    SkillError,
    SkillNotFoundError,
    SkillParseError,
)

# Models
from skillregistry.skills.models import (
    ParsedSkillQuery,
    ReadyState,
    ResolvedResource,
    ResourceInjection,
    Skill,
    SkillRank,
    SkillRegistryDebugInfo,
    SkillResource,
    SkillResourceMap,
    SkillSearchInjection,
    SkillSearchResult,
)

# Indexer
from skillregistry.skills.indexer import (
    MANIFEST_FILENAME,
    ResourceIndex,
    detect_mime_type,
    index_bundle,
    index_skill_resources,
)

# Parser
from skillregistry.skills.parser import (
    derive_tool_name,
    load_skill_from_path,
    parse_skill_directory,
    parse_skill_manifest,
    parse_yaml_frontmatter,
    strip_leading_html_comment_blocks,
)

# Loader
from skillregistry.skills.loader import (
    discover_all_skills,
    discover_skills_in_directory,
    get_toolname_from_skill_path,
    is_skill_path,
)

# Controller
from skillregistry.skills.controller import SkillRegistryController, normalize_alias

# Search
from skillregistry.skills.search import parse_query, rank_skill, search_skills

# Registry
from skillregistry.skills.registry import SkillRegistry

# Resolver
from skillregistry.skills.resolver import (
    SkillResourceResolver,
    find_resource,
    is_unsafe_resource_path,
    normalize_resource_path,
)

# Tools
from skillregistry.skills.tools import SkillResourceReader, find_skills

__all__ = [
    # Exceptions
    "AliasCollisionError",
    "InitializationError",
    "ManifestFormatError",
    "ManifestValidationError",
    "ResourceNotFoundError",
    "ResourceReadError",
    "SkillError",
    "SkillNotFoundError",
    "SkillParseError",
    # Models
    "ParsedSkillQuery",
    "ReadyState",
    "ResolvedResource",
    "ResourceInjection",
    "Skill",
    "SkillRank",
    "SkillRegistryDebugInfo",
    "SkillResource",
    "SkillResourceMap",
    "SkillSearchInjection",
    "SkillSearchResult",
    # Indexer
    "MANIFEST_FILENAME",
    "ResourceIndex",
    "detect_mime_type",
    "index_bundle",
    "index_skill_resources",
    # Parser
    "derive_tool_name",
    "load_skill_from_path",
    "parse_skill_directory",
    "parse_skill_manifest",
    "parse_yaml_frontmatter",
    "strip_leading_html_comment_blocks",
    # Loader
    "discover_all_skills",
    "discover_skills_in_directory",
    "get_toolname_from_skill_path",
    "is_skill_path",
    # Controller
    "SkillRegistryController",
    "normalize_alias",
    # Search
    "parse_query",
    "rank_skill",
    "search_skills",
    # Registry
    "SkillRegistry",
    # Resolver
    "SkillResourceResolver",
    "find_resource",
    "is_unsafe_resource_path",
    "normalize_resource_path",
    # Tools
    "SkillResourceReader",
    "find_skills",
]
