"""
Skill discovery for skillregistry.

Finds skill bundles (directories holding a SKILL.md manifest) under the
configured base paths.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from skillregistry.skills.indexer import MANIFEST_FILENAME
from skillregistry.skills.parser import derive_tool_name

logger = logging.getLogger(__name__)

SKIPPED_DIRECTORIES = {"node_modules"}


def is_skill_path(path: Path | str) -> bool:
    """Check whether a path names a skill manifest file."""
    return Path(path).name == MANIFEST_FILENAME


def get_toolname_from_skill_path(path: Path | str) -> str | None:
    """Derive the tool name for a manifest path from its bundle directory.

    Args:
        path: Path to a SKILL.md file.

    Returns:
        The tool name, or None if the path is not a skill manifest location.
    """
    path = Path(path)
    if not is_skill_path(path) or not path.parent.name:
        return None
    return derive_tool_name(path.parent.name) or None


def discover_skills_in_directory(
    directory: Path, ancestors: frozenset[Path] = frozenset()
) -> list[Path]:
    """Discover all skill manifests below a directory.

    A directory holding SKILL.md is a bundle; its subdirectories are not
    searched further. Dot-directories and node_modules are skipped, as are
    directory symlinks leading back into a directory already being walked.

    Args:
        directory: Directory to search.

    Returns:
        List of manifest paths, in sorted walk order.
    """
    manifest = directory / MANIFEST_FILENAME
    if manifest.is_file():
        return [manifest]

    try:
        real = directory.resolve()
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except (OSError, RuntimeError) as e:
        logger.debug(f"Cannot list {directory}: {e}")
        return []
    if real in ancestors:
        logger.debug(f"Skipping symlink cycle: {directory}")
        return []
    ancestors = ancestors | {real}

    manifests = []
    for entry in entries:
        if entry.name.startswith(".") or entry.name in SKIPPED_DIRECTORIES:
            continue
        if entry.is_dir():
            manifests.extend(discover_skills_in_directory(entry, ancestors))

    return manifests


def discover_all_skills(base_paths: Iterable[Path]) -> list[Path]:
    """Discover skill manifests across base paths.

    Manifests reachable from more than one base path are returned once.

    Args:
        base_paths: Directories to search, in priority order.

    Returns:
        Unique manifest paths.
    """
    seen: set[Path] = set()
    manifests: list[Path] = []

    for base_path in base_paths:
        base_path = Path(base_path).expanduser()
        if not base_path.is_dir():
            logger.debug(f"Skipping missing skills directory: {base_path}")
            continue

        for manifest in discover_skills_in_directory(base_path):
            key = manifest.resolve()
            if key in seen:
                continue
            seen.add(key)
            manifests.append(manifest)

    logger.debug(f"Discovered {len(manifests)} skill manifest(s)")
    return manifests
