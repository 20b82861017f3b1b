"""Exception types raised by the bundle patch pipeline.

Every error is terminal for a run. The working directory is never cleaned
up on failure, so it can be inspected or reused with recompile-only mode.
"""

from pathlib import Path


class BundlePatchError(Exception):
    """Base class for all bundlepatch errors."""


class ConfigurationError(BundlePatchError):
    """Raised when run flags cannot be honoured against the filesystem state."""


class DiscoveryError(BundlePatchError):
    """Raised when no patchable artifacts can be located in a bundle."""

    def __init__(self, message: str, working_dir: Path):
        self.working_dir = working_dir
        super().__init__(message)


class DuplicateArtifactError(DiscoveryError):
    """Raised when a manifest names the same artifact more than once."""

    def __init__(self, working_dir: Path, duplicates: list[Path]):
        self.duplicates = duplicates
        names = ", ".join(str(p) for p in duplicates)
        super().__init__(
            f"Manifest in {working_dir} lists the same artifact more than once: {names}",
            working_dir,
        )


class ManifestError(BundlePatchError):
    """Raised when manifest.json exists but cannot be parsed."""

    def __init__(self, message: str, manifest_path: Path):
        self.manifest_path = manifest_path
        super().__init__(message)
