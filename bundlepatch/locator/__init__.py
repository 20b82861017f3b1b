"""Artifact discovery for extracted bundles.

Public API:
    find_artifact_paths(working_dir) -> list[Path]
    read_manifest(working_dir) -> Manifest | None
"""

from bundlepatch.locator.discovery import artifact_paths_from_manifest, find_artifact_paths
from bundlepatch.locator.manifest import (
    EmptyManifest,
    LegacyManifest,
    Manifest,
    SplitManifest,
    parse_manifest,
    read_manifest,
)

__all__ = [
    "find_artifact_paths",
    "artifact_paths_from_manifest",
    "read_manifest",
    "parse_manifest",
    "Manifest",
    "SplitManifest",
    "LegacyManifest",
    "EmptyManifest",
]
