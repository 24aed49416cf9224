"""
Tests for resource resolution and the tool entry points.
"""

import base64
import os
from pathlib import Path

import pytest

from skillregistry.config import RegistryConfig
from skillregistry.skills import (
    InitializationError,
    ResourceNotFoundError,
    ResourceReadError,
    SkillNotFoundError,
    SkillRegistry,
    SkillResourceReader,
    SkillResourceResolver,
    find_resource,
    find_skills,
    is_unsafe_resource_path,
    load_skill_from_path,
    normalize_resource_path,
)

# =============================================================================
# Path helpers
# =============================================================================


class TestResourcePaths:
    """Tests for request path normalization and safety checks."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Workflows\\Onboarding.md", "Workflows/Onboarding.md"),
            ("/references//guide.md/", "references/guide.md"),
            ("CoreStack.md", "CoreStack.md"),
            ("", ""),
        ],
    )
    def test_normalize(self, value: str, expected: str):
        """Test slash normalization with case preserved."""
        assert normalize_resource_path(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["", "/", "/etc/passwd", "\\etc\\passwd", "C:\\Windows\\x", "c:/x", "../../secret", "a/../../b"],
    )
    def test_unsafe(self, value: str):
        """Test that empty, absolute, and upward paths are unsafe."""
        assert is_unsafe_resource_path(value)

    @pytest.mark.parametrize("value", ["guide.md", "references/guide.md", "a..b.md", "Workflows\\x.md"])
    def test_safe(self, value: str):
        """Test ordinary bundle-relative paths."""
        assert not is_unsafe_resource_path(value)


# =============================================================================
# Lookup
# =============================================================================


class TestFindResource:
    """Tests for find_resource against indexed bundles."""

    @pytest.fixture
    def standard(self, skills_root: Path):
        return load_skill_from_path(skills_root / "test-skill")

    @pytest.fixture
    def pai(self, skills_root: Path):
        return load_skill_from_path(skills_root / "PAI")

    def test_legacy_type_and_bare_name(self, standard):
        """Test type=reference with a path relative to references/."""
        entry = find_resource(standard, "reference", "guide.md")
        assert entry.absolute_path.name == "guide.md"

    def test_legacy_type_and_prefixed_path(self, standard):
        """Test type=script with the directory already in the path."""
        entry = find_resource(standard, "scripts", "scripts/build.sh")
        assert entry.mime_type == "application/x-sh"

    def test_generic_type_with_legacy_path(self, standard):
        """Test an untyped request for a legacy resource."""
        entry = find_resource(standard, "", "references/guide.md")
        assert entry.absolute_path.name == "guide.md"

    def test_generic_type_sweeps_legacy_maps(self, standard):
        """Test that an untyped bare name is found in references."""
        entry = find_resource(standard, "resource", "guide.md")
        assert entry.absolute_path.parent.name == "references"

    def test_workflow_type(self, pai):
        """Test type=workflow looks under Workflows/."""
        entry = find_resource(pai, "workflow", "Onboarding.md")
        assert entry.absolute_path.name == "Onboarding.md"

    def test_tool_type(self, pai):
        """Test type=tool looks under Tools/."""
        entry = find_resource(pai, "tool", "Inference.ts")
        assert entry.mime_type == "application/typescript"

    def test_generic_finds_workflow(self, pai):
        """Test that untyped names are tried under Workflows/ and Tools/."""
        assert find_resource(pai, "", "Onboarding.md").absolute_path.name == "Onboarding.md"
        assert find_resource(pai, "", "Inference.ts").absolute_path.name == "Inference.ts"

    def test_root_file(self, pai):
        """Test a file at the bundle root."""
        assert find_resource(pai, "", "CoreStack.md").absolute_path.name == "CoreStack.md"

    def test_type_as_directory(self, pai):
        """Test that an unknown type is used as a directory prefix."""
        entry = find_resource(pai, "SYSTEM", "PAISYSTEMARCHITECTURE.md")
        assert entry.absolute_path.parent.name == "SYSTEM"

    def test_type_as_path(self, pai):
        """Test that a path given as type with no relative path resolves."""
        entry = find_resource(pai, "Components/10-intro.md", "")
        assert entry.absolute_path.name == "10-intro.md"

    def test_case_insensitive_fallback(self, pai):
        """Test that lookups fall back to case-insensitive matching."""
        entry = find_resource(pai, "workflow", "onboarding.md")
        assert entry.absolute_path.name == "Onboarding.md"

    def test_backslashes(self, pai):
        """Test Windows-style separators."""
        entry = find_resource(pai, "", "Workflows\\Onboarding.md")
        assert entry.absolute_path.name == "Onboarding.md"

    @pytest.mark.parametrize(
        "path",
        ["USER/README.md", "WORK/notes.md", "node_modules/fake/readme.md", ".git/config", "SKILL.md"],
    )
    def test_excluded_files_not_found(self, pai, path: str):
        """Test that excluded and unindexed files cannot be reached."""
        with pytest.raises(ResourceNotFoundError):
            find_resource(pai, "", path)

    @pytest.mark.parametrize(
        ("resource_type", "path"),
        [
            ("", "/etc/passwd"),
            ("reference", "C:\\Windows\\x"),
            ("", "../../secret"),
            ("reference", "../PAI/CoreStack.md"),
            ("../PAI", "CoreStack.md"),
            ("", ""),
        ],
    )
    def test_unsafe_requests(self, standard, resource_type: str, path: str):
        """Test that unsafe requests are rejected as not found."""
        with pytest.raises(ResourceNotFoundError):
            find_resource(standard, resource_type, path)

    def test_not_found_message(self, standard):
        """Test that the error echoes only the request."""
        with pytest.raises(ResourceNotFoundError) as exc_info:
            find_resource(standard, "reference", "missing.md")

        message = str(exc_info.value)
        assert "test_skill" in message
        assert "missing.md" in message
        assert str(standard.full_path) not in message


# =============================================================================
# Resolver
# =============================================================================


class TestSkillResourceResolver:
    """Tests for SkillResourceResolver."""

    @pytest.mark.asyncio
    async def test_resolve_text(self, registry_config: RegistryConfig):
        """Test reading a markdown resource."""
        resolver = SkillResourceResolver(SkillRegistry(registry_config))
        resolved = await resolver.resolve("PAI", "workflow", "Onboarding.md")

        assert resolved.content == "# Onboarding\n\nWelcome.\n"
        assert resolved.mime_type == "text/markdown"
        assert resolved.encoding == "text"
        assert resolved.absolute_path.is_absolute()

    @pytest.mark.asyncio
    async def test_resolve_waits_for_initialise(self, registry_config: RegistryConfig):
        """Test that the resolver initialises an idle registry."""
        registry = SkillRegistry(registry_config)
        await SkillResourceResolver(registry).resolve("test_skill", "reference", "guide.md")
        assert registry.is_ready

    @pytest.mark.asyncio
    async def test_resolve_by_alias(self, registry_config: RegistryConfig):
        """Test that skill names are resolved through aliases."""
        resolver = SkillResourceResolver(SkillRegistry(registry_config))
        resolved = await resolver.resolve("test-skill", "", "scripts/build.sh")
        assert resolved.content.startswith("#!/bin/sh")

    @pytest.mark.asyncio
    async def test_bare_reference_matches_prefixed(self, registry_config: RegistryConfig):
        """Test that a bare reference name reads the same file as the prefixed path."""
        resolver = SkillResourceResolver(SkillRegistry(registry_config))
        bare = await resolver.resolve("test_skill", "reference", "guide.md")
        prefixed = await resolver.resolve("test_skill", "", "references/guide.md")

        assert bare.content == prefixed.content
        assert bare.absolute_path == prefixed.absolute_path

    @pytest.mark.asyncio
    async def test_symlinked_scripts_outside_bundle_unreadable(
        self, temp_dir: Path, write_file, skill_md
    ):
        """Test that files behind a scripts/ symlink leaving the bundle cannot be read."""
        bundle = temp_dir / "skills" / "leaky"
        write_file(bundle / "SKILL.md", skill_md("leaky"))
        outside = temp_dir / "outside"
        write_file(outside / "secret.txt", "TOPSECRET\n")

        try:
            os.symlink(outside, bundle / "scripts")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        registry = SkillRegistry(RegistryConfig(base_paths=[temp_dir / "skills"]))
        resolver = SkillResourceResolver(registry)
        for resource_type, path in [("script", "secret.txt"), ("", "scripts/secret.txt")]:
            with pytest.raises(ResourceNotFoundError):
                await resolver.resolve("leaky", resource_type, path)

    @pytest.mark.asyncio
    async def test_binary_resource(self, registry_config: RegistryConfig, skills_root: Path):
        """Test that non-UTF-8 files are returned base64-encoded."""
        data = b"\x89PNG\r\n\x1a\n\x00\xff\xfe"
        (skills_root / "test-skill" / "assets" / "icon.png").write_bytes(data)

        resolver = SkillResourceResolver(SkillRegistry(registry_config))
        resolved = await resolver.resolve("test_skill", "asset", "icon.png")

        assert resolved.encoding == "base64"
        assert resolved.mime_type == "image/png"
        assert base64.b64decode(resolved.content) == data

    @pytest.mark.asyncio
    async def test_unknown_skill(self, registry_config: RegistryConfig):
        """Test a request for an unregistered skill."""
        resolver = SkillResourceResolver(SkillRegistry(registry_config))
        with pytest.raises(SkillNotFoundError):
            await resolver.resolve("nope", "", "README.md")

    @pytest.mark.asyncio
    async def test_read_error(self, registry_config: RegistryConfig, skills_root: Path):
        """Test that a file removed after indexing raises ResourceReadError."""
        registry = SkillRegistry(registry_config)
        await registry.initialise()
        (skills_root / "test-skill" / "README.md").unlink()

        with pytest.raises(ResourceReadError) as exc_info:
            await SkillResourceResolver(registry).resolve("test_skill", "", "README.md")

        message = str(exc_info.value)
        assert "README.md" in message
        assert str(skills_root) not in message

    @pytest.mark.asyncio
    async def test_failed_registry(self, temp_dir: Path):
        """Test that requests against a failed registry raise its error."""
        registry = SkillRegistry(RegistryConfig(base_paths=[temp_dir / "missing"]))
        with pytest.raises(InitializationError):
            await SkillResourceResolver(registry).resolve("x", "", "y.md")


# =============================================================================
# Tool entry points
# =============================================================================


class TestToolEntryPoints:
    """Tests for find_skills and SkillResourceReader."""

    @pytest.mark.asyncio
    async def test_find_skills(self, registry_config: RegistryConfig):
        """Test the search payload."""
        injection = await find_skills(SkillRegistry(registry_config), "test_skill")

        assert injection.query == "test_skill"
        assert injection.skills == [
            {"name": "test_skill", "description": "A test skill for unit tests of the registry"}
        ]
        assert injection.summary["total"] == 2
        assert injection.summary["matches"] == 1
        assert injection.debug is None

    @pytest.mark.asyncio
    async def test_find_skills_debug(self, skills_root: Path):
        """Test that debug mode attaches registration info."""
        registry = SkillRegistry(RegistryConfig(base_paths=[skills_root], debug=True))
        injection = await find_skills(registry, ["-nothing"])

        assert len(injection.skills) == 2
        assert injection.debug is not None
        assert injection.debug.rejected == 2

    @pytest.mark.asyncio
    async def test_reader(self, registry_config: RegistryConfig):
        """Test the resource payload."""
        reader = SkillResourceReader(SkillRegistry(registry_config))
        injection = await reader("PAI", "Workflows\\Onboarding.md")

        assert injection.skill_name == "PAI"
        assert injection.resource_path == "Workflows/Onboarding.md"
        assert injection.resource_mimetype == "text/markdown"
        assert injection.content.startswith("# Onboarding")

    @pytest.mark.asyncio
    async def test_reader_with_type(self, registry_config: RegistryConfig):
        """Test reading with an explicit type."""
        reader = SkillResourceReader(SkillRegistry(registry_config))
        injection = await reader("test_skill", "guide.md", type="reference")
        assert injection.content.startswith("# Guide")

    @pytest.mark.asyncio
    async def test_reader_not_found(self, registry_config: RegistryConfig):
        """Test that missing resources propagate."""
        reader = SkillResourceReader(SkillRegistry(registry_config))
        with pytest.raises(ResourceNotFoundError):
            await reader("PAI", "USER/README.md")
