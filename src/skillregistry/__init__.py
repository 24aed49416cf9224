"""
skillregistry - Skill registry and resource resolver for LLM agents

Indexes skill bundles, searches them by name and description, and resolves
bundle resources safely for prompt injection.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("skillregistry")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "__version__",
]
