"""Pipeline orchestrator: runs the bundle patch stages in order.

Pipeline:
  validate -> extract -> discover -> patch (xN) -> sign -> compress

Each stage is awaited to completion before the next starts. The first
stage that raises aborts the run and its exception propagates unchanged.
Nothing is rolled back: the working directory under tmp_dir is left as-is
so it can be inspected or reused with recompile_only.

Progress:
  on_event(event_type, stage, data) is invoked for stage_started,
  stage_skipped, stage_completed, stage_failed and stage_output. A callback
  that raises is logged and otherwise ignored.
"""

import logging
import time
import uuid
from typing import Optional

import structlog

from bundlepatch.core.logging import bind_run_id
from bundlepatch.pipeline.stages import EventCallback, build_stages
from bundlepatch.pipeline.types import (
    BundleKind,
    PipelineResult,
    PipelineState,
    RunConfiguration,
    Stage,
    StageResult,
    StageStatus,
)

logger = logging.getLogger(__name__)
run_logger = structlog.get_logger(__name__)


def _make_emitter(on_event: Optional[EventCallback]) -> EventCallback:
    def _emit(event_type: str, stage: str, data: dict) -> None:
        if on_event is None:
            return
        try:
            on_event(event_type, stage, data)
        except Exception:
            logger.warning(
                "Event callback failed for %s/%s", event_type, stage, exc_info=True
            )

    return _emit


async def run_stages(
    stages: list[Stage],
    config: RunConfiguration,
    result: PipelineResult,
    emit: EventCallback,
) -> None:
    """Execute stages in order, recording each outcome on result."""
    for stage in stages:
        if not stage.enabled(config):
            result.stages.append(StageResult(name=stage.name, status=StageStatus.DISABLED))
            continue

        if stage.skip(config):
            logger.info("Stage '%s' skipped", stage.name)
            result.stages.append(StageResult(name=stage.name, status=StageStatus.SKIPPED))
            emit("stage_skipped", stage.name, {})
            continue

        logger.info("Stage '%s' starting", stage.name)
        emit("stage_started", stage.name, {})
        start = time.monotonic()
        try:
            await stage.action()
        except Exception as exc:
            duration = time.monotonic() - start
            result.stages.append(StageResult(
                name=stage.name,
                status=StageStatus.FAILED,
                duration_seconds=duration,
                error=str(exc),
            ))
            logger.error("Stage '%s' failed after %.1fs: %s", stage.name, duration, exc)
            emit("stage_failed", stage.name, {"error": str(exc)})
            raise

        duration = time.monotonic() - start
        result.stages.append(StageResult(
            name=stage.name,
            status=StageStatus.COMPLETED,
            duration_seconds=duration,
        ))
        logger.info("Stage '%s' completed (%.1fs)", stage.name, duration)
        emit("stage_completed", stage.name, {"duration_seconds": round(duration, 3)})


async def run_pipeline(
    config: RunConfiguration,
    bundle_kind: BundleKind = BundleKind.XAPK,
    on_event: Optional[EventCallback] = None,
    run_id: Optional[str] = None,
) -> PipelineResult:
    """Run the full bundle patch pipeline for config.

    Returns a PipelineResult on success. Any stage failure propagates.
    """
    run_id = run_id or uuid.uuid4().hex[:12]
    emit = _make_emitter(on_event)
    state = PipelineState()
    result = PipelineResult(run_id=run_id, bundle_kind=bundle_kind)

    with bind_run_id(run_id):
        run_logger.info(
            "pipeline_started",
            bundle_kind=bundle_kind.value,
            input_path=str(config.input_path),
            bundle_dir=str(config.bundle_dir),
            decompile_only=config.decompile_only,
            recompile_only=config.recompile_only,
        )
        await run_stages(build_stages(config, state, emit), config, result, emit)

        result.artifact_paths = list(state.artifact_paths)
        if not config.decompile_only:
            result.output_path = config.output_path

        run_logger.info(
            "pipeline_finished",
            executed_stages=result.executed_stages,
            artifact_count=len(result.artifact_paths),
        )
    return result


async def patch_xapk_bundle(
    config: RunConfiguration,
    on_event: Optional[EventCallback] = None,
) -> PipelineResult:
    return await run_pipeline(config, BundleKind.XAPK, on_event=on_event)


async def patch_apks_bundle(
    config: RunConfiguration,
    on_event: Optional[EventCallback] = None,
) -> PipelineResult:
    return await run_pipeline(config, BundleKind.APKS, on_event=on_event)
