"""Filesystem helpers shared by discovery and the sign stage."""

from pathlib import Path

ARTIFACT_EXTENSION = ".apk"
ARTIFACT_GLOB = f"*{ARTIFACT_EXTENSION}"


def find_files(root: Path, pattern: str, recursive: bool = False) -> list[Path]:
    """Return absolute paths of regular files under root matching pattern.

    The root directory is never interpreted as a pattern, so directory names
    containing glob metacharacters (``[``, ``*``) are matched literally.
    Results are sorted lexicographically by their string form.
    """
    root = Path(root).absolute()
    matches = root.rglob(pattern) if recursive else root.glob(pattern)
    return sorted((p for p in matches if p.is_file()), key=str)


def artifact_stem(artifact_path: Path) -> str:
    """Return the artifact's base name without its extension."""
    return Path(artifact_path).stem


def artifact_scratch_dir(tmp_dir: Path, artifact_path: Path) -> Path:
    """Private scratch directory for one artifact's patch step."""
    return Path(tmp_dir) / artifact_stem(artifact_path)
