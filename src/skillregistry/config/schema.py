"""
Pydantic configuration schema for skillregistry.

This module defines the configuration models with validation.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skillregistry.storage.paths import get_default_skill_paths

RendererFormat = Literal["json", "xml", "md"]


class RegistryConfig(BaseModel):
    """Skill registry configuration.

    The registry only reads these values.
    """

    model_config = ConfigDict(extra="allow")

    debug: bool = False
    base_paths: list[Path] = Field(default_factory=get_default_skill_paths)
    prompt_renderer: RendererFormat = "xml"
    model_renderers: dict[str, RendererFormat] = Field(default_factory=dict)

    @field_validator("base_paths", mode="before")
    @classmethod
    def _split_base_paths(cls, value: object) -> object:
        if isinstance(value, (str, Path)):
            return [value]
        return value

    @field_validator("base_paths")
    @classmethod
    def _expand_base_paths(cls, value: list[Path]) -> list[Path]:
        return [Path(p).expanduser() for p in value]
