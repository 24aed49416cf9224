"""
Resource indexer for skillregistry.

Walks a skill bundle and builds the path -> metadata maps used to resolve
resources without touching paths outside the bundle.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from skillregistry.skills.models import SkillResource, SkillResourceMap

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "SKILL.md"

LEGACY_DIRECTORIES = ("scripts", "references", "assets")

# Top-level directories of a bundle that hold user or scratch data.
EXCLUDED_PREFIXES = ("USER", "WORK", "node_modules")

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    # Text and docs
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".txt": "text/plain",
    ".rst": "text/x-rst",
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".csv": "text/csv",
    ".xml": "application/xml",
    ".pdf": "application/pdf",
    # Data and config
    ".json": "application/json",
    ".yaml": "application/yaml",
    ".yml": "application/yaml",
    ".toml": "application/toml",
    ".ini": "text/plain",
    # Scripts and source
    ".sh": "application/x-sh",
    ".bash": "application/x-sh",
    ".zsh": "application/x-sh",
    ".py": "text/x-python",
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".cjs": "application/javascript",
    ".ts": "application/typescript",
    ".tsx": "application/typescript",
    ".jsx": "application/javascript",
    ".rb": "text/x-ruby",
    ".go": "text/x-go",
    ".rs": "text/x-rust",
    ".java": "text/x-java",
    ".sql": "application/sql",
    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    # Fonts and archives
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".zip": "application/zip",
    ".gz": "application/gzip",
    ".tar": "application/x-tar",
}


@dataclass
class ResourceIndex:
    """All resource maps built for one bundle."""

    scripts: SkillResourceMap = field(default_factory=dict)
    references: SkillResourceMap = field(default_factory=dict)
    assets: SkillResourceMap = field(default_factory=dict)
    resources: SkillResourceMap = field(default_factory=dict)


def detect_mime_type(path: Path | str) -> str:
    """Get the MIME type for a file from its extension.

    Args:
        path: File path or name.

    Returns:
        The MIME type, or application/octet-stream for unknown extensions.
    """
    return MIME_TYPES.get(PurePosixPath(str(path)).suffix.lower(), DEFAULT_MIME_TYPE)


def _contained(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, RuntimeError, ValueError):
        return False
    return True


def _list_files(
    directory: Path,
    root: Path,
    skip_excluded: bool,
    ancestors: frozenset[Path] = frozenset(),
) -> list[Path]:
    """Recursively list files below a directory.

    Unreadable directories are logged and yield nothing. Symlinks that
    point outside ``root`` are skipped, as are directory symlinks leading
    back into a directory already being walked.
    """
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

    files: list[Path] = []
    for entry in entries:
        if entry.is_symlink() and not _contained(entry, root):
            logger.debug(f"Skipping symlink leaving the bundle: {entry}")
            continue

        if entry.is_dir():
            if entry.name.startswith("."):
                continue
            if skip_excluded and entry.parent == root and entry.name in EXCLUDED_PREFIXES:
                continue
            files.extend(_list_files(entry, root, skip_excluded, ancestors))
        elif entry.is_file():
            files.append(entry)

    return files


def _build_map(files: list[Path], root: Path, exclude: Path | None = None) -> SkillResourceMap:
    excluded = exclude.resolve() if exclude is not None else None
    resource_map: SkillResourceMap = {}
    for file_path in files:
        if excluded is not None and file_path.resolve() == excluded:
            continue
        relative = file_path.relative_to(root).as_posix()
        resource_map[relative] = SkillResource(
            absolute_path=file_path.absolute(),
            mime_type=detect_mime_type(file_path),
        )
    return resource_map


def index_legacy_directory(
    root: Path, directory: str, manifest_path: Path | None = None
) -> SkillResourceMap:
    """Index one of the fixed ``scripts``/``references``/``assets`` directories.

    Keys keep the directory prefix, e.g. ``scripts/build.sh``. A directory
    that is a symlink leaving the bundle indexes nothing.
    """
    target = root / directory
    if not target.is_dir():
        return {}
    if not _contained(target, root):
        logger.debug(f"Skipping {directory}/ outside the bundle: {target}")
        return {}
    manifest = Path(manifest_path) if manifest_path is not None else root / MANIFEST_FILENAME
    return _build_map(_list_files(target, root, skip_excluded=False), root, exclude=manifest)


def index_bundle(root: Path, manifest_path: Path | None = None) -> SkillResourceMap:
    """Index every file of a bundle except the manifest and excluded trees.

    Args:
        root: Bundle root directory.
        manifest_path: Manifest file to leave out (defaults to ``root/SKILL.md``).

    Returns:
        Map of bundle-relative POSIX paths (case preserved) to resource metadata.
    """
    root = Path(root).absolute()
    manifest = root / MANIFEST_FILENAME
    if manifest_path is not None:
        manifest = Path(manifest_path).absolute()
    return _build_map(_list_files(root, root, skip_excluded=True), root, exclude=manifest)


def index_skill_resources(root: Path, manifest_path: Path | None = None) -> ResourceIndex:
    """Build the legacy and unified resource maps for a bundle."""
    root = Path(root).absolute()
    index = ResourceIndex(
        scripts=index_legacy_directory(root, "scripts", manifest_path),
        references=index_legacy_directory(root, "references", manifest_path),
        assets=index_legacy_directory(root, "assets", manifest_path),
        resources=index_bundle(root, manifest_path),
    )
    logger.debug(
        f"Indexed {root}: {len(index.scripts)} scripts, {len(index.references)} references, "
        f"{len(index.assets)} assets, {len(index.resources)} resources"
    )
    return index
