"""Types for the bundle patch pipeline.

RunConfiguration is the immutable input to one run. Stage is a declarative
descriptor (name, predicates, action). StageResult and PipelineResult
record what happened to each stage.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Awaitable, Callable, Optional

from bundlepatch.tools.archive import Archiver, ZipArchiver
from bundlepatch.tools.patcher import ArtifactPatcher
from bundlepatch.tools.signer import ArtifactSigner

BUNDLE_DIRNAME = "bundle"


class BundleKind(StrEnum):
    """Bundle flavour. Both share the same container and pipeline."""

    XAPK = "xapk"
    APKS = "apks"


@dataclass(frozen=True)
class RunConfiguration:
    """Inputs for one pipeline run.

    decompile_only and recompile_only are not validated against each other;
    each stage reacts to each flag on its own.
    """

    input_path: Path
    output_path: Path
    tmp_dir: Path
    signer: ArtifactSigner
    patcher: ArtifactPatcher
    archiver: Archiver = field(default_factory=ZipArchiver)
    decompile_only: bool = False
    recompile_only: bool = False

    @property
    def bundle_dir(self) -> Path:
        """Working directory holding the extracted bundle."""
        return Path(self.tmp_dir).absolute() / BUNDLE_DIRNAME


@dataclass
class PipelineState:
    """Mutable state shared between stages of one run."""

    artifact_paths: list[Path] = field(default_factory=list)


StagePredicate = Callable[[RunConfiguration], bool]
StageAction = Callable[[], Awaitable[None]]


def _always(config: RunConfiguration) -> bool:
    return True


def _never(config: RunConfiguration) -> bool:
    return False


@dataclass(frozen=True)
class Stage:
    """One named pipeline step.

    enabled=False hides the stage entirely (it is a conditional check).
    skip=True keeps it in the run record but does not execute it.
    """

    name: str
    action: StageAction
    enabled: StagePredicate = _always
    skip: StagePredicate = _never


class StageStatus(StrEnum):
    COMPLETED = "completed"
    SKIPPED = "skipped"
    DISABLED = "disabled"
    FAILED = "failed"


@dataclass
class StageResult:
    name: str
    status: StageStatus
    duration_seconds: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status.value,
            "duration_seconds": round(self.duration_seconds, 3),
            "error": self.error,
        }


@dataclass
class PipelineResult:
    """Record of a completed pipeline run.

    artifact_paths is the discovery output, in patch order.
    output_path is None when the run stopped after patching.
    """

    run_id: str
    bundle_kind: BundleKind
    stages: list[StageResult] = field(default_factory=list)
    artifact_paths: list[Path] = field(default_factory=list)
    output_path: Optional[Path] = None

    def stage(self, name: str) -> Optional[StageResult]:
        return next((s for s in self.stages if s.name == name), None)

    @property
    def executed_stages(self) -> list[str]:
        return [s.name for s in self.stages if s.status == StageStatus.COMPLETED]

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "bundle_kind": self.bundle_kind.value,
            "stages": [s.to_dict() for s in self.stages],
            "artifact_paths": [str(p) for p in self.artifact_paths],
            "output_path": str(self.output_path) if self.output_path else None,
            "total_duration_seconds": round(
                sum(s.duration_seconds for s in self.stages), 3
            ),
        }
