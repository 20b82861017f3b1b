"""External collaborators: archive codec, patch tool, signer, process runner."""

from bundlepatch.tools.archive import Archiver, ZipArchiver
from bundlepatch.tools.patcher import ArtifactPatcher, CommandPatcher
from bundlepatch.tools.process import ToolError, ToolResult, run_tool, stream_tool
from bundlepatch.tools.signer import ArtifactSigner, SignOptions, UberApkSigner

__all__ = [
    "Archiver",
    "ZipArchiver",
    "ArtifactPatcher",
    "CommandPatcher",
    "ArtifactSigner",
    "SignOptions",
    "UberApkSigner",
    "ToolError",
    "ToolResult",
    "run_tool",
    "stream_tool",
]
