"""Parse a bundle's manifest.json into one of its known shapes.

XAPK bundles ship a manifest.json at the archive root. Two shapes exist
in the wild:

  split form   — ``{"split_apks": [{"file": "base.apk", "id": "base"}, ...]}``
  legacy form  — ``{"package_name": "com.example.app"}``, implying a single
                 ``com.example.app.apk`` next to the manifest

The raw document is validated once and resolved into a tagged variant
(SplitManifest | LegacyManifest | EmptyManifest). A missing file resolves
to None so callers can fall back to globbing.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from bundlepatch.errors import ManifestError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"


class SplitApkEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    file: str


class ManifestDocument(BaseModel):
    """Raw manifest.json content. Keys other than these two are ignored.

    A split_apks value that is not a list is treated as absent, so the
    package_name form still applies.
    """

    model_config = ConfigDict(extra="ignore")

    split_apks: Optional[list[SplitApkEntry]] = None
    package_name: Optional[str] = None

    @field_validator("split_apks", mode="before")
    @classmethod
    def ignore_non_list_split_apks(cls, v: object) -> object:
        return v if isinstance(v, list) else None


@dataclass(frozen=True)
class SplitManifest:
    """Manifest listing each split artifact by relative file path."""

    files: tuple[str, ...]


@dataclass(frozen=True)
class LegacyManifest:
    """Single-artifact manifest naming only the package identifier."""

    package_name: str


@dataclass(frozen=True)
class EmptyManifest:
    """Manifest present but naming no artifacts."""


Manifest = Union[SplitManifest, LegacyManifest, EmptyManifest]


def resolve_manifest(document: ManifestDocument) -> Manifest:
    """Pick the manifest shape. split_apks wins over package_name."""
    if document.split_apks is not None:
        return SplitManifest(files=tuple(entry.file for entry in document.split_apks))
    if document.package_name:
        return LegacyManifest(package_name=document.package_name)
    return EmptyManifest()


def parse_manifest(content: str, manifest_path: Path) -> Manifest:
    """Parse manifest text. Raises ManifestError on malformed content."""
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestError(
            f"Invalid JSON in {manifest_path}: {exc}", manifest_path
        ) from exc

    if not isinstance(payload, dict):
        raise ManifestError(
            f"Expected a JSON object in {manifest_path}, got {type(payload).__name__}",
            manifest_path,
        )

    try:
        document = ManifestDocument.model_validate(payload)
    except ValidationError as exc:
        raise ManifestError(
            f"Unexpected manifest structure in {manifest_path}: {exc}", manifest_path
        ) from exc

    return resolve_manifest(document)


def read_manifest(working_dir: Path) -> Optional[Manifest]:
    """Read and resolve manifest.json, or return None if the bundle has none."""
    manifest_path = Path(working_dir) / MANIFEST_FILENAME
    if not manifest_path.is_file():
        logger.debug("No %s in %s", MANIFEST_FILENAME, working_dir)
        return None

    manifest = parse_manifest(manifest_path.read_text(encoding="utf-8"), manifest_path)
    logger.debug("Resolved %s as %s", manifest_path, type(manifest).__name__)
    return manifest
