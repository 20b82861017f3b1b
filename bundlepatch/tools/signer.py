"""Re-sign patched artifacts with uber-apk-signer.

The signer is run once for the whole artifact set and overwrites each
file in place. Its output is streamed line by line so long signing runs
show progress.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional, Protocol, Sequence

from bundlepatch.core.config import Settings, get_settings
from bundlepatch.sandbox.limits import ResourceLimits
from bundlepatch.tools.process import stream_tool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignOptions:
    """Options for a signing call.

    zipalign: run zipalign before signing. The pipeline disables it because
    the patch step already produces aligned output.
    """

    zipalign: bool = True


class ArtifactSigner(Protocol):
    def sign(self, paths: Sequence[Path], options: SignOptions) -> AsyncIterator[str]:
        """Sign paths in place, yielding human-readable progress lines."""


class UberApkSigner:
    """ArtifactSigner backed by `java -jar uber-apk-signer.jar`."""

    def __init__(
        self,
        jar_path: str,
        java_path: str = "java",
        limits: Optional[ResourceLimits] = None,
    ):
        self.jar_path = jar_path
        self.java_path = java_path
        self.limits = limits

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "UberApkSigner":
        settings = settings or get_settings()
        return cls(
            jar_path=settings.uber_apk_signer_jar,
            java_path=settings.java_path,
            limits=ResourceLimits.from_settings(settings),
        )

    def build_command(self, paths: Sequence[Path], options: SignOptions) -> list[str]:
        command = [
            self.java_path,
            "-jar",
            self.jar_path,
            "--allowResign",
            "--overwrite",
        ]
        if not options.zipalign:
            command.append("--skipZipAlign")
        command.append("--apks")
        command.extend(str(p) for p in paths)
        return command

    async def sign(
        self, paths: Sequence[Path], options: SignOptions
    ) -> AsyncIterator[str]:
        if not paths:
            logger.warning("Signer called with no artifacts; nothing to sign")
            return

        logger.info("Signing %d artifact(s) (zipalign=%s)", len(paths), options.zipalign)
        async for line in stream_tool(self.build_command(paths, options), limits=self.limits):
            if line.strip():
                yield line
