from bundlepatch.utils.paths import (
    ARTIFACT_EXTENSION,
    ARTIFACT_GLOB,
    artifact_scratch_dir,
    artifact_stem,
    find_files,
)

__all__ = [
    "ARTIFACT_EXTENSION",
    "ARTIFACT_GLOB",
    "artifact_scratch_dir",
    "artifact_stem",
    "find_files",
]
