"""
Pytest configuration and fixtures for skillregistry tests.
"""

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from skillregistry.config import RegistryConfig, clear_config_cache
from skillregistry.skills import Skill, derive_tool_name

DESCRIPTION = "A test skill used to exercise the registry in unit tests."


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[Path, None, None]:
    """Point SKILLREGISTRY_HOME at an empty directory and drop env overrides."""
    home = tmp_path / ".skillregistry"
    monkeypatch.setenv("SKILLREGISTRY_HOME", str(home))
    for var in ("SKILLREGISTRY_DEBUG", "SKILLREGISTRY_BASE_PATHS", "SKILLREGISTRY_PROMPT_RENDERER"):
        monkeypatch.delenv(var, raising=False)
    clear_config_cache()
    yield home
    clear_config_cache()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _write_file(path: Path, content: str = "") -> Path:
    """Write a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _skill_md(name: str, description: str = DESCRIPTION, body: str = "# Instructions\n\nDo it.") -> str:
    """Build SKILL.md text."""
    return f"---\nname: {name}\ndescription: {description}\n---\n\n{body}\n"


@pytest.fixture
def write_file() -> Callable[..., Path]:
    """Provide a helper that writes a file, creating parent directories."""
    return _write_file


@pytest.fixture
def skill_md() -> Callable[..., str]:
    """Provide a helper that builds minimal valid SKILL.md text."""
    return _skill_md


@pytest.fixture
def sample_skill_md() -> str:
    """Provide sample SKILL.md content."""
    return """---
name: test_skill
description: A test skill for unit tests of the registry
license: MIT
allowed-tools: bash file_read
metadata:
  version: 1.0.0
  author: Team
---

# Test Skill

This is a test skill for unit testing.

## Instructions

1. Do something
2. Do something else
"""


@pytest.fixture
def skills_root(temp_dir: Path, sample_skill_md: str) -> Path:
    """Provide a skills directory holding a standard bundle, a PAI-style bundle, and broken ones."""
    root = temp_dir / "skills"

    standard = root / "test-skill"
    _write_file(standard / "SKILL.md", sample_skill_md)
    _write_file(standard / "scripts" / "build.sh", "#!/bin/sh\necho build\n")
    _write_file(standard / "references" / "guide.md", "# Guide\n\nHow to use it.\n")
    _write_file(standard / "assets" / "logo.svg", "<svg></svg>\n")
    _write_file(standard / "Workflows" / "QuickStart.md", "# Quick Start\n")
    _write_file(standard / "Tools" / "Helper.ts", "export const helper = 1;\n")
    _write_file(standard / "README.md", "# Readme\n")

    pai = root / "PAI"
    _write_file(
        pai / "SKILL.md",
        "<!--\nGenerated by tooling. Do not edit.\n-->\n\n" + _skill_md("PAI", body="# PAI"),
    )
    _write_file(pai / "Workflows" / "Onboarding.md", "# Onboarding\n\nWelcome.\n")
    _write_file(pai / "Tools" / "Inference.ts", "export async function infer() {}\n")
    _write_file(pai / "CoreStack.md", "# Core Stack\n")
    _write_file(pai / "SYSTEM" / "PAISYSTEMARCHITECTURE.md", "# Architecture\n")
    _write_file(pai / "Components" / "10-intro.md", "# Intro\n")
    _write_file(pai / "USER" / "README.md", "private\n")
    _write_file(pai / "WORK" / "notes.md", "scratch\n")
    _write_file(pai / "node_modules" / "fake" / "readme.md", "dependency\n")
    _write_file(pai / ".git" / "config", "[core]\n")

    _write_file(root / "broken" / "SKILL.md", "# No frontmatter here\n")
    _write_file(root / "short" / "SKILL.md", _skill_md("short", description="Too short"))

    return root


@pytest.fixture
def registry_config(skills_root: Path) -> RegistryConfig:
    """Provide a config pointing at the sample skills directory."""
    return RegistryConfig(base_paths=[skills_root])


@pytest.fixture
def make_skill(temp_dir: Path) -> Callable[..., Skill]:
    """Provide a factory for in-memory skills."""

    def _make(
        name: str,
        description: str = DESCRIPTION,
        tool_name: str | None = None,
        path: Path | None = None,
    ) -> Skill:
        bundle = temp_dir / "bundles" / name
        return Skill(
            name=name,
            tool_name=tool_name or derive_tool_name(name),
            description=description,
            content="",
            path=path or bundle / "SKILL.md",
            full_path=bundle,
        )

    return _make
