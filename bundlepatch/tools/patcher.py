"""Per-artifact patch step.

The patch transform itself is opaque to the pipeline: it receives one
artifact's input and output paths plus a private scratch directory, and
either completes or raises. CommandPatcher adapts any external tool with
a command line of the form::

    my-patcher {input} -o {output} --work {tmp_dir}
"""

import logging
import shlex
from pathlib import Path
from typing import Optional, Protocol, Sequence

from bundlepatch.core.config import Settings, get_settings
from bundlepatch.sandbox.limits import ResourceLimits
from bundlepatch.tools.process import run_tool

logger = logging.getLogger(__name__)

PLACEHOLDERS = ("input", "output", "tmp_dir")


class ArtifactPatcher(Protocol):
    async def patch(self, input_path: Path, output_path: Path, tmp_dir: Path) -> None:
        """Patch input_path into output_path using tmp_dir for scratch files."""


class CommandPatcher:
    """ArtifactPatcher that shells out to a configured command template."""

    def __init__(
        self,
        command: Sequence[str],
        limits: Optional[ResourceLimits] = None,
    ):
        if not command:
            raise ValueError("CommandPatcher requires a non-empty command")
        self.command = list(command)
        self.limits = limits

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CommandPatcher":
        settings = settings or get_settings()
        if not settings.patch_command.strip():
            raise ValueError(
                "No patch command configured; set BUNDLEPATCH_PATCH_COMMAND"
            )
        return cls(
            command=shlex.split(settings.patch_command),
            limits=ResourceLimits.from_settings(settings),
        )

    def build_command(self, input_path: Path, output_path: Path, tmp_dir: Path) -> list[str]:
        values = {
            "input": str(input_path),
            "output": str(output_path),
            "tmp_dir": str(tmp_dir),
        }
        command = list(self.command)
        for key in PLACEHOLDERS:
            token = "{" + key + "}"
            command = [part.replace(token, values[key]) for part in command]
        return command

    async def patch(self, input_path: Path, output_path: Path, tmp_dir: Path) -> None:
        Path(tmp_dir).mkdir(parents=True, exist_ok=True)
        command = self.build_command(input_path, output_path, tmp_dir)
        result = await run_tool(command, cwd=Path(tmp_dir), limits=self.limits)
        logger.debug("Patch tool output for %s:\n%s", Path(input_path).name, result.stdout)
