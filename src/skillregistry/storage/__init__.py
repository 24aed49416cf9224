"""Storage path helpers for skillregistry."""

from skillregistry.storage.paths import (
    get_default_skill_paths,
    get_global_config_path,
    get_skillregistry_home,
    get_skills_dir,
)

__all__ = [
    "get_default_skill_paths",
    "get_global_config_path",
    "get_skillregistry_home",
    "get_skills_dir",
]
