"""
Skill models for skillregistry.

Defines the data structures for skills, their indexed resources, search
queries and results, and registry bookkeeping.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ReadyState(str, Enum):
    """Lifecycle states of a skill registry."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class SkillResource(BaseModel):
    """Metadata for one indexed file inside a skill bundle.

    The owning map keys entries by their normalized bundle-relative path,
    so the path itself is not repeated here.
    """

    model_config = ConfigDict(frozen=True)

    absolute_path: Path = Field(..., description="Absolute filesystem path (indexed at load time)")
    mime_type: str = Field(default="application/octet-stream", description="Detected MIME type")


SkillResourceMap = dict[str, SkillResource]


class Skill(BaseModel):
    """A parsed skill bundle.

    Resources are indexed once when the skill is parsed, which keeps lookups
    fast and confines resolution to files that really live in the bundle.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Declared skill name from frontmatter")
    tool_name: str = Field(..., description="Sanitized callable identifier")
    description: str = Field(..., description="Description from frontmatter")
    content: str = Field(default="", description="Markdown body of the manifest")
    path: Path = Field(..., description="Path to the SKILL.md manifest")
    full_path: Path = Field(..., description="Path to the bundle root directory")

    metadata: dict[str, str] | None = Field(default=None, description="Free-form metadata")
    license: str | None = Field(default=None, description="License (e.g., MIT)")
    allowed_tools: list[str] | None = Field(
        default=None,
        description="Declared tools (informational, not enforced)",
    )

    scripts: SkillResourceMap = Field(default_factory=dict)
    references: SkillResourceMap = Field(default_factory=dict)
    assets: SkillResourceMap = Field(default_factory=dict)
    resources: SkillResourceMap | None = Field(
        default=None,
        description="Unified index of the whole bundle tree",
    )


class ParsedSkillQuery(BaseModel):
    """A search query split into include and exclude terms."""

    model_config = ConfigDict(frozen=True)

    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    original_query: list[str] = Field(default_factory=list)
    has_exclusions: bool = False
    term_count: int = 0


class SkillRank(BaseModel):
    """Ranking metrics for one skill against a query."""

    skill: Skill
    name_matches: int = 0
    desc_matches: int = 0
    total_score: int = 0


class SkillSearchResult(BaseModel):
    """Ranked search output with a short human-readable summary."""

    matches: list[Skill] = Field(default_factory=list)
    total_matches: int = 0
    total_skills: int = 0
    feedback: str = ""
    query: ParsedSkillQuery


class SkillRegistryDebugInfo(BaseModel):
    """Summary of one registration pass."""

    discovered: int = 0
    parsed: int = 0
    rejected: int = 0
    errors: list[str] = Field(default_factory=list)

    def merge(self, other: "SkillRegistryDebugInfo") -> None:
        """Fold another pass into this summary."""
        self.discovered += other.discovered
        self.parsed += other.parsed
        self.rejected += other.rejected
        self.errors.extend(other.errors)


class ResolvedResource(BaseModel):
    """A resource located in a skill and read from disk.

    Binary files are returned base64-encoded.
    """

    absolute_path: Path
    content: str
    mime_type: str
    encoding: Literal["text", "base64"] = "text"


class ResourceInjection(BaseModel):
    """Resource payload handed to a prompt renderer."""

    skill_name: str
    resource_path: str
    resource_mimetype: str
    content: str


class SkillSearchInjection(BaseModel):
    """Search payload handed to a prompt renderer."""

    query: str | list[str]
    skills: list[dict[str, str]] = Field(default_factory=list)
    summary: dict[str, Any] = Field(default_factory=dict)
    debug: SkillRegistryDebugInfo | None = None
