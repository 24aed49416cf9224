"""
Path utilities for skillregistry.

Provides consistent path resolution for configuration and skill directories.
"""

import os
from pathlib import Path


def get_skillregistry_home() -> Path:
    """
    Get the skillregistry home directory.

    Resolution order:
    1. SKILLREGISTRY_HOME environment variable
    2. Default: ~/.skillregistry

    Returns:
        Path to the home directory.
    """
    env_home = os.environ.get("SKILLREGISTRY_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".skillregistry"


def get_global_config_path() -> Path:
    """
    Get the path to the global configuration file.

    Returns:
        Path to ~/.skillregistry/config.yaml
    """
    return get_skillregistry_home() / "config.yaml"


def get_skills_dir() -> Path:
    """
    Get the global skills directory.

    Returns:
        Path to ~/.skillregistry/skills/
    """
    return get_skillregistry_home() / "skills"


def get_default_skill_paths() -> list[Path]:
    """
    Get the default skill search paths, highest priority first.

    Returns:
        Global skills dir, the OpenCode user skills dir, and project-local dirs.
    """
    cwd = Path.cwd()
    return [
        get_skills_dir(),
        Path.home() / ".config" / "opencode" / "skills",
        cwd / ".opencode" / "skills",
        cwd / ".skills",
    ]
