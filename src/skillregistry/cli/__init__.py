"""Command-line interface for skillregistry."""
