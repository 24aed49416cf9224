"""Registry controller: in-memory skill store with alias resolution."""

import logging
import re
import threading
from typing import Optional

from skillregistry.skills.exceptions import AliasCollisionError
from skillregistry.skills.models import Skill

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[-\s]+")


def normalize_alias(key: str) -> str:
    """Fold a lookup key to its alias form.

    Lower-cases and maps kebab/space separators to underscores, so
    ``Foo-Bar``, ``foo_bar`` and ``FOO BAR`` share one alias.
    """
    return _SEPARATORS.sub("_", key.strip().lower())


def skill_aliases(key: str, skill: Skill) -> list[str]:
    """Get the alias keys a skill is reachable under when stored at ``key``."""
    aliases: list[str] = []
    for candidate in (key, skill.tool_name, skill.name):
        alias = normalize_alias(candidate)
        if alias and alias not in aliases:
            aliases.append(alias)
    return aliases


def _same_skill(a: Skill, b: Skill) -> bool:
    # A re-parsed bundle replaces its previous record wholesale.
    return a is b or a.path == b.path


class SkillRegistryController:
    """In-memory store of skills keyed by id, with alias lookup.

    Every alias maps to at most one skill. Binding an alias that already
    points at a different skill raises AliasCollisionError and leaves the
    store unchanged.
    """

    def __init__(self):
        """Initialize an empty controller."""
        self._primary: dict[str, Skill] = {}
        self._aliases: dict[str, Skill] = {}
        self._skills: list[Skill] = []
        self._lock = threading.RLock()

    @property
    def skills(self) -> list[Skill]:
        """Distinct registered skills in registration order."""
        with self._lock:
            return list(self._skills)

    @property
    def ids(self) -> list[str]:
        """Primary keys in registration order."""
        with self._lock:
            return list(self._primary.keys())

    def set(self, key: str, skill: Skill) -> None:
        """Register a skill under a key and its aliases.

        Args:
            key: Primary key (usually the tool name).
            skill: Skill to store.

        Raises:
            AliasCollisionError: If any alias is bound to a different skill.
        """
        aliases = skill_aliases(key, skill)

        with self._lock:
            previous: Optional[Skill] = None
            for alias in aliases:
                existing = self._aliases.get(alias)
                if existing is None:
                    continue
                if not _same_skill(existing, skill):
                    raise AliasCollisionError(alias, existing.name, skill.name)
                previous = existing

            existing_primary = self._primary.get(key)
            if existing_primary is not None:
                if not _same_skill(existing_primary, skill):
                    raise AliasCollisionError(key, existing_primary.name, skill.name)
                previous = existing_primary

            if previous is not None and previous is not skill:
                self._replace(previous, skill, key)

            self._primary[key] = skill
            for alias in aliases:
                self._aliases[alias] = skill
            if not any(s is skill for s in self._skills):
                self._skills.append(skill)

        logger.debug(f"Registered skill '{skill.name}' under {key!r} (aliases: {aliases})")

    def _replace(self, old: Skill, new: Skill, key: str) -> None:
        # The new record takes the old one's slot under ``key``; stale keys go.
        primary: dict[str, Skill] = {}
        for k, v in self._primary.items():
            if v is not old:
                primary[k] = v
            elif key not in primary:
                primary[key] = new
        self._primary = primary
        self._aliases = {k: v for k, v in self._aliases.items() if v is not old}
        self._skills = [new if s is old else s for s in self._skills]

    def get(self, key: str) -> Optional[Skill]:
        """Get a skill by exact key, then by folded alias.

        Returns:
            The skill or None if not found.
        """
        with self._lock:
            skill = self._primary.get(key)
            if skill is None:
                skill = self._aliases.get(normalize_alias(key))
            return skill

    def has(self, key: str) -> bool:
        """Check whether a key or alias resolves to a skill."""
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        """Remove the skill a key resolves to, with all of its aliases.

        Returns:
            True if a skill was removed, False if not found.
        """
        with self._lock:
            skill = self.get(key)
            if skill is None:
                return False

            self._primary = {k: v for k, v in self._primary.items() if v is not skill}
            self._aliases = {k: v for k, v in self._aliases.items() if v is not skill}
            self._skills = [s for s in self._skills if s is not skill]

        logger.debug(f"Removed skill '{skill.name}'")
        return True

    def clear(self) -> None:
        """Remove all skills and aliases."""
        with self._lock:
            self._primary.clear()
            self._aliases.clear()
            self._skills.clear()

    def __len__(self) -> int:
        return len(self._skills)
