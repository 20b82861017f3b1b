"""Locate the artifacts to patch inside an extracted bundle.

Resolution order:
  1. manifest.json with split_apks  — every listed file, sorted by path
  2. manifest.json with package_name — the single <package_name>.apk
  3. manifest.json with neither     — nothing (caller decides)
  4. no manifest                    — top-level *.apk files, sorted by path

The no-manifest glob is deliberately shallow. The sign stage re-scans
recursively after patching; discovery only looks at the bundle root.

Discovery never touches the filesystem beyond reads. An empty result is
returned as-is; rejecting it is the orchestrator's job.
"""

import logging
import os
from collections import Counter
from pathlib import Path
from typing import Optional

from bundlepatch.errors import DuplicateArtifactError, ManifestError
from bundlepatch.locator.manifest import (
    EmptyManifest,
    LegacyManifest,
    MANIFEST_FILENAME,
    Manifest,
    SplitManifest,
    read_manifest,
)
from bundlepatch.utils.paths import ARTIFACT_EXTENSION, ARTIFACT_GLOB, find_files

logger = logging.getLogger(__name__)


def _resolve_entry(working_dir: Path, entry: str) -> Path:
    """Join a manifest entry under working_dir, collapsing dot segments.

    Leading separators are stripped so absolute entries stay rooted in the
    bundle. Entries that still resolve outside it raise ManifestError.
    """
    path = Path(os.path.normpath(working_dir / entry.lstrip("/\\")))
    if path == working_dir or not path.is_relative_to(working_dir):
        raise ManifestError(
            f"Manifest entry {entry!r} resolves outside {working_dir}",
            working_dir / MANIFEST_FILENAME,
        )
    return path


def artifact_paths_from_manifest(working_dir: Path, manifest: Manifest) -> list[Path]:
    """Map a resolved manifest to absolute artifact paths under working_dir."""
    working_dir = Path(os.path.normpath(Path(working_dir).absolute()))

    match manifest:
        case SplitManifest(files=files):
            paths = [_resolve_entry(working_dir, name) for name in files]
            duplicates = sorted(
                (p for p, count in Counter(paths).items() if count > 1), key=str
            )
            if duplicates:
                raise DuplicateArtifactError(working_dir, duplicates)
            return sorted(paths, key=str)
        case LegacyManifest(package_name=package_name):
            return [_resolve_entry(working_dir, f"{package_name}{ARTIFACT_EXTENSION}")]
        case EmptyManifest():
            return []

    raise TypeError(f"Unsupported manifest type: {type(manifest).__name__}")


def find_artifact_paths(working_dir: Path) -> list[Path]:
    """Return the ordered list of artifact paths to patch in working_dir."""
    working_dir = Path(working_dir).absolute()
    manifest: Optional[Manifest] = read_manifest(working_dir)

    if manifest is not None:
        paths = artifact_paths_from_manifest(working_dir, manifest)
        logger.info(
            "Manifest (%s) lists %d artifact(s) in %s",
            type(manifest).__name__, len(paths), working_dir,
        )
        return paths

    paths = find_files(working_dir, ARTIFACT_GLOB, recursive=False)
    logger.info("No manifest; found %d top-level artifact(s) in %s", len(paths), working_dir)
    return paths
