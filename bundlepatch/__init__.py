"""Patch, re-sign and repackage multi-APK app bundles (XAPK / APKS).

Public API:
    patch_xapk_bundle(config), patch_apks_bundle(config), run_pipeline(config)
    RunConfiguration, PipelineResult
    find_artifact_paths(working_dir)
"""

from bundlepatch.errors import (
    BundlePatchError,
    ConfigurationError,
    DiscoveryError,
    DuplicateArtifactError,
    ManifestError,
)
from bundlepatch.locator import find_artifact_paths
from bundlepatch.pipeline import (
    BundleKind,
    PipelineResult,
    RunConfiguration,
    patch_apks_bundle,
    patch_xapk_bundle,
    run_pipeline,
)

__all__ = [
    "patch_xapk_bundle",
    "patch_apks_bundle",
    "run_pipeline",
    "find_artifact_paths",
    "BundleKind",
    "PipelineResult",
    "RunConfiguration",
    "BundlePatchError",
    "ConfigurationError",
    "DiscoveryError",
    "DuplicateArtifactError",
    "ManifestError",
]
