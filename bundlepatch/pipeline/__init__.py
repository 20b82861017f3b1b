"""Staged pipeline for repackaging multi-artifact bundles.

Public API:
    run_pipeline(config) -> PipelineResult
    patch_xapk_bundle(config), patch_apks_bundle(config)
    RunConfiguration, PipelineResult, StageResult
"""

from bundlepatch.pipeline.orchestrator import (
    patch_apks_bundle,
    patch_xapk_bundle,
    run_pipeline,
    run_stages,
)
from bundlepatch.pipeline.stages import STAGE_ORDER, build_stages
from bundlepatch.pipeline.types import (
    BundleKind,
    PipelineResult,
    PipelineState,
    RunConfiguration,
    Stage,
    StageResult,
    StageStatus,
)

__all__ = [
    "run_pipeline",
    "run_stages",
    "patch_xapk_bundle",
    "patch_apks_bundle",
    "build_stages",
    "STAGE_ORDER",
    "BundleKind",
    "PipelineResult",
    "PipelineState",
    "RunConfiguration",
    "Stage",
    "StageResult",
    "StageStatus",
]
