"""Permission fix-up for freshly extracted bundles.

Some bundles carry zip entries with restrictive Unix modes (e.g. 0400),
which makes the in-place patch and sign steps fail with EACCES. After
extraction the owner is granted read/write on the whole tree. Windows
does not honour those modes, so the step is skipped there.
"""

import logging
import sys
from pathlib import Path

from bundlepatch.tools.process import run_tool

logger = logging.getLogger(__name__)


def needs_permission_fixup() -> bool:
    return sys.platform != "win32"


async def grant_owner_read_write(root: Path) -> None:
    """Recursively add u+rw to root. No-op on Windows."""
    if not needs_permission_fixup():
        logger.debug("Skipping permission fix-up on Windows")
        return

    await run_tool(["chmod", "-R", "u+rw", str(root)])
    logger.debug("Granted owner read/write on %s", root)
