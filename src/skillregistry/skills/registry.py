"""
Skill registry for skillregistry.

Discovers skill bundles under the configured base paths, parses them, and
serves search and lookup from an in-memory controller once ready.
"""

import asyncio
import logging
from pathlib import Path

from skillregistry.config.schema import RegistryConfig
from skillregistry.skills.controller import SkillRegistryController
from skillregistry.skills.exceptions import (
    AliasCollisionError,
    InitializationError,
    SkillError,
    SkillNotFoundError,
)
from skillregistry.skills.loader import (
    discover_all_skills,
    get_toolname_from_skill_path,
    is_skill_path,
)
from skillregistry.skills.models import (
    ReadyState,
    Skill,
    SkillRegistryDebugInfo,
    SkillSearchResult,
)
from skillregistry.skills.parser import load_skill_from_path
from skillregistry.skills.search import search_skills

logger = logging.getLogger(__name__)


class SkillRegistry:
    """Main interface for working with skills.

    Lifecycle: ``idle -> initializing -> ready``, or ``failed`` when no base
    path can be used. ``initialise()`` runs discovery once; concurrent and
    later callers await the same outcome. A failed registry keeps raising
    the original error.
    """

    def __init__(self, config: RegistryConfig | None = None):
        """Initialize the registry.

        Args:
            config: Registry configuration (defaults to RegistryConfig()).
        """
        self.config = config or RegistryConfig()
        self.controller = SkillRegistryController()
        self.debug: SkillRegistryDebugInfo | None = None
        self._state = ReadyState.IDLE
        self._init_task: asyncio.Task[None] | None = None
        self._error: InitializationError | None = None

    @property
    def state(self) -> ReadyState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_ready(self) -> bool:
        """Whether initialisation completed successfully."""
        return self._state is ReadyState.READY

    async def initialise(self) -> None:
        """Discover and register all skills under the configured base paths.

        Safe to call repeatedly and concurrently.

        Raises:
            InitializationError: If no base path exists, or discovered skills collide.
        """
        if self._state is ReadyState.READY:
            return
        if self._state is ReadyState.FAILED and self._error is not None:
            raise self._error

        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._run_initialise())

        await asyncio.shield(self._init_task)

    async def _run_initialise(self) -> None:
        self._state = ReadyState.INITIALIZING
        base_paths = [Path(p).expanduser() for p in self.config.base_paths]

        try:
            existing = [p for p in base_paths if p.is_dir()]
            for missing in (p for p in base_paths if p not in existing):
                logger.debug(f"Skills directory not found: {missing}")

            if not existing:
                raise InitializationError("No skill base paths could be found", base_paths)

            manifests = await asyncio.to_thread(discover_all_skills, existing)

            info = await self.register(*manifests)

        except InitializationError as e:
            self._fail(e)
            raise
        except (AliasCollisionError, OSError) as e:
            error = InitializationError(f"Skill registration failed: {e}")
            self._fail(error)
            raise error from e

        self._state = ReadyState.READY
        logger.info(
            f"Skill registry ready: {len(self.controller)} skill(s) "
            f"({info.rejected} rejected) from {len(existing)} base path(s)"
        )

    def _fail(self, error: InitializationError) -> None:
        self._state = ReadyState.FAILED
        self._error = error
        logger.error(f"Skill registry initialisation failed: {error}")

    async def register(self, *skill_paths: Path | str) -> SkillRegistryDebugInfo:
        """Parse skill bundles and add them to the controller.

        Bundles are parsed concurrently; results are stored in the order the
        paths were given. A bundle that fails to parse is counted as
        rejected and does not stop the others.

        Args:
            *skill_paths: Bundle directories or SKILL.md paths.

        Returns:
            Summary of discovered, parsed and rejected bundles.

        Raises:
            AliasCollisionError: If a parsed skill's alias belongs to another skill.
        """
        paths = list(dict.fromkeys(Path(p) for p in skill_paths))
        info = SkillRegistryDebugInfo(discovered=len(paths))

        results = await asyncio.gather(
            *(asyncio.to_thread(load_skill_from_path, path) for path in paths),
            return_exceptions=True,
        )

        for path, result in zip(paths, results):
            if isinstance(result, SkillError):
                info.rejected += 1
                info.errors.append(str(result))
                logger.warning(f"Rejected skill at {path}: {result}")
                continue
            if isinstance(result, BaseException):
                raise result

            self.controller.set(result.tool_name, result)
            info.parsed += 1

        if self.config.debug:
            if self.debug is None:
                self.debug = SkillRegistryDebugInfo()
            self.debug.merge(info)

        logger.debug(
            f"Registered {info.parsed} of {info.discovered} skill(s), {info.rejected} rejected"
        )
        return info

    def _ensure_ready(self) -> None:
        if self._state is ReadyState.FAILED and self._error is not None:
            raise self._error
        if self._state is not ReadyState.READY:
            raise InitializationError("Skill registry is not ready; await initialise() first")

    def search(self, query: str | list[str]) -> SkillSearchResult:
        """Search registered skills.

        Args:
            query: Query string or list of strings. ``-term`` excludes.

        Returns:
            Ranked search result.

        Raises:
            InitializationError: If the registry is not ready.
        """
        self._ensure_ready()
        return search_skills(self.controller.skills, query)

    def get_skill(self, key: str) -> Skill:
        """Get a registered skill by id or alias.

        Raises:
            InitializationError: If the registry is not ready.
            SkillNotFoundError: If no skill matches.
        """
        self._ensure_ready()
        skill = self.controller.get(key)
        if skill is None:
            raise SkillNotFoundError(key)
        return skill

    @staticmethod
    def is_skill_path(path: Path | str) -> bool:
        """Check whether a path names a skill manifest."""
        return is_skill_path(path)

    @staticmethod
    def get_toolname_from_skill_path(path: Path | str) -> str | None:
        """Derive a tool name from a manifest path, or None."""
        return get_toolname_from_skill_path(path)
