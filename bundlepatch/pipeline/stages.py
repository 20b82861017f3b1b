"""Stage definitions for the bundle patch pipeline.

Stage order and policy:
  1. validate  — only with recompile_only; the working dir must already exist
  2. extract   — skipped with recompile_only; unzip + permission fix-up
  3. discover  — always; locate artifacts, reject an empty set
  4. patch     — always; one patch call per artifact, strictly in order
  5. sign      — skipped with decompile_only; recursive re-scan, one signer call
  6. compress  — skipped with decompile_only; zip the working dir

The patch stage contains both the decompile and recompile halves of the
patch tool, which is why neither flag skips it.
"""

import logging
from pathlib import Path
from typing import Callable

from bundlepatch.errors import ConfigurationError, DiscoveryError
from bundlepatch.locator.discovery import find_artifact_paths
from bundlepatch.pipeline.types import PipelineState, RunConfiguration, Stage
from bundlepatch.sandbox.permissions import grant_owner_read_write
from bundlepatch.tools.signer import SignOptions
from bundlepatch.utils.paths import ARTIFACT_GLOB, artifact_scratch_dir, find_files

logger = logging.getLogger(__name__)

STAGE_VALIDATE = "validate"
STAGE_EXTRACT = "extract"
STAGE_DISCOVER = "discover"
STAGE_PATCH = "patch"
STAGE_SIGN = "sign"
STAGE_COMPRESS = "compress"

STAGE_ORDER = (
    STAGE_VALIDATE,
    STAGE_EXTRACT,
    STAGE_DISCOVER,
    STAGE_PATCH,
    STAGE_SIGN,
    STAGE_COMPRESS,
)

EventCallback = Callable[[str, str, dict], None]


def _recompile_only(config: RunConfiguration) -> bool:
    return config.recompile_only


def _decompile_only(config: RunConfiguration) -> bool:
    return config.decompile_only


async def validate_bundle_dir(config: RunConfiguration) -> None:
    """Fail unless a previous run left an extracted bundle behind."""
    bundle_dir = config.bundle_dir
    if not bundle_dir.is_dir():
        raise ConfigurationError(
            f"Cannot use recompile-only mode: bundle directory does not exist at {bundle_dir}. "
            f"Run with decompile-only first, or point tmp_dir at the directory used "
            f"in the previous run."
        )
    logger.info("Reusing extracted bundle at %s", bundle_dir)


async def extract_bundle(config: RunConfiguration) -> None:
    await config.archiver.decompress(Path(config.input_path), config.bundle_dir)
    await grant_owner_read_write(config.bundle_dir)


async def discover_artifacts(config: RunConfiguration, state: PipelineState) -> None:
    paths = find_artifact_paths(config.bundle_dir)
    if not paths:
        raise DiscoveryError(
            f"No APK files found in bundle at {config.bundle_dir}", config.bundle_dir
        )
    state.artifact_paths = paths
    logger.info("Found %d artifact(s) to patch", len(paths))


async def patch_artifacts(config: RunConfiguration, state: PipelineState) -> None:
    """Patch each artifact in place, one at a time.

    Each artifact gets tmp_dir/<stem> as scratch space. Artifacts are not
    patched concurrently; the patch tool is memory hungry and runs its own
    worker pool.
    """
    total = len(state.artifact_paths)
    for index, artifact_path in enumerate(state.artifact_paths, start=1):
        scratch_dir = artifact_scratch_dir(Path(config.tmp_dir).absolute(), artifact_path)
        logger.info("Patching %s (%d/%d)", artifact_path.name, index, total)
        await config.patcher.patch(artifact_path, artifact_path, scratch_dir)


async def sign_artifacts(config: RunConfiguration, emit: EventCallback) -> None:
    # Re-scan: patching may have moved artifacts into subdirectories.
    paths = find_files(config.bundle_dir, ARTIFACT_GLOB, recursive=True)
    logger.info("Signing %d artifact(s) under %s", len(paths), config.bundle_dir)

    async for line in config.signer.sign(paths, SignOptions(zipalign=False)):
        logger.info("[signer] %s", line)
        emit("stage_output", STAGE_SIGN, {"line": line})


async def compress_bundle(config: RunConfiguration) -> None:
    await config.archiver.compress(config.bundle_dir, Path(config.output_path))


def build_stages(
    config: RunConfiguration,
    state: PipelineState,
    emit: EventCallback,
) -> list[Stage]:
    """Return the ordered stage descriptors for one run."""
    return [
        Stage(
            name=STAGE_VALIDATE,
            action=lambda: validate_bundle_dir(config),
            enabled=_recompile_only,
        ),
        Stage(
            name=STAGE_EXTRACT,
            action=lambda: extract_bundle(config),
            skip=_recompile_only,
        ),
        Stage(
            name=STAGE_DISCOVER,
            action=lambda: discover_artifacts(config, state),
        ),
        Stage(
            name=STAGE_PATCH,
            action=lambda: patch_artifacts(config, state),
        ),
        Stage(
            name=STAGE_SIGN,
            action=lambda: sign_artifacts(config, emit),
            skip=_decompile_only,
        ),
        Stage(
            name=STAGE_COMPRESS,
            action=lambda: compress_bundle(config),
            skip=_decompile_only,
        ),
    ]
