"""Run external tools as asyncio subprocesses.

Two flavours:
  run_tool()    — wait for completion, capture stdout/stderr
  stream_tool() — yield stdout lines as the tool prints them

Both raise ToolError when the binary is missing or exits non-zero. No
timeout is applied; a hung tool blocks the run until it is killed
externally.
"""

import asyncio
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional, Sequence

from bundlepatch.errors import BundlePatchError
from bundlepatch.sandbox.limits import ResourceLimits, preexec_fn_for

logger = logging.getLogger(__name__)

_EXIT_SUCCESS = 0


class ToolError(BundlePatchError):
    """Raised when an external tool cannot be started or exits non-zero."""

    def __init__(
        self,
        message: str,
        command: Sequence[str],
        exit_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = list(command)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


@dataclass
class ToolResult:
    """Captured outcome of a completed tool invocation."""

    command: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def is_success(self) -> bool:
        return self.exit_code == _EXIT_SUCCESS


def _truncate_output(text: str, max_lines: int = 60, max_chars: int = 4000) -> str:
    """Return a concise tail of command output for logs."""
    if not text:
        return ""
    tail = "\n".join(text.splitlines()[-max_lines:])
    if len(tail) > max_chars:
        tail = tail[-max_chars:]
    return tail


async def _spawn(
    command: Sequence[str],
    cwd: Optional[Path],
    limits: Optional[ResourceLimits],
    stderr: int,
) -> asyncio.subprocess.Process:
    try:
        return await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd) if cwd is not None else None,
            stdout=subprocess.PIPE,
            stderr=stderr,
            preexec_fn=preexec_fn_for(limits),
        )
    except FileNotFoundError as exc:
        raise ToolError(
            f"{command[0]} not found; ensure it is installed and on PATH",
            command,
        ) from exc
    except OSError as exc:
        raise ToolError(f"Could not start {command[0]}: {exc}", command) from exc


def _raise_for_exit(
    command: Sequence[str], exit_code: int, stdout: str, stderr: str
) -> None:
    if exit_code == _EXIT_SUCCESS:
        return
    name = Path(command[0]).name
    if stderr:
        logger.warning("%s stderr (tail):\n%s", name, _truncate_output(stderr))
    if stdout:
        logger.warning("%s stdout (tail):\n%s", name, _truncate_output(stdout))
    raise ToolError(
        f"{name} failed with exit code {exit_code}",
        command,
        exit_code=exit_code,
        stdout=stdout,
        stderr=stderr,
    )


async def run_tool(
    command: Sequence[str],
    cwd: Optional[Path] = None,
    limits: Optional[ResourceLimits] = None,
) -> ToolResult:
    """Run a command to completion and return its captured output.

    Raises ToolError if the command cannot be started or exits non-zero.
    """
    command = [str(part) for part in command]
    logger.debug("Running %s (cwd=%s)", " ".join(command), cwd)

    process = await _spawn(command, cwd, limits, stderr=subprocess.PIPE)
    stdout_bytes, stderr_bytes = await process.communicate()
    stdout = stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else ""
    stderr = stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else ""

    _raise_for_exit(command, process.returncode, stdout, stderr)
    return ToolResult(
        command=command, exit_code=process.returncode, stdout=stdout, stderr=stderr
    )


async def stream_tool(
    command: Sequence[str],
    cwd: Optional[Path] = None,
    limits: Optional[ResourceLimits] = None,
) -> AsyncIterator[str]:
    """Yield the command's output lines as they arrive.

    stderr is merged into stdout so progress and diagnostics interleave in
    the order the tool printed them. Raises ToolError after the last line
    if the command exits non-zero.
    """
    command = [str(part) for part in command]
    logger.debug("Streaming %s (cwd=%s)", " ".join(command), cwd)

    process = await _spawn(command, cwd, limits, stderr=subprocess.STDOUT)
    lines: list[str] = []
    try:
        async for raw in process.stdout:
            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            lines.append(line)
            yield line
        exit_code = await process.wait()
    finally:
        if process.returncode is None:
            logger.warning("Killing %s: output consumer stopped early", command[0])
            process.kill()
            await process.wait()

    _raise_for_exit(command, exit_code, "\n".join(lines), "")
