"""Resource limits for external tool processes.

Provides a `preexec_fn`-compatible callable that sets hard resource limits
on child processes before exec. The signer and patch tools are JVM-based
and can run for a long time on large bundles, so the defaults are generous;
the limits exist to stop a wedged tool from eating the host.

Platform notes:
  - Linux / macOS: `resource` module is available and rlimits are enforced.
  - Windows: `resource` module is unavailable. The returned callable is
    never installed on Windows (see `preexec_fn_for`).

Memory policy:
  - `RLIMIT_AS` defaults to 12 GB of virtual address space. A JVM reserves
    its maximum heap plus metaspace up front, so lower caps make `java`
    abort at startup even on an idle machine.
  - Setting `BUNDLEPATCH_RLIMIT_AS_BYTES=0` skips `RLIMIT_AS` entirely.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Optional

from bundlepatch.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceLimits:
    """rlimit values applied to each child process."""

    memory_bytes: int
    cpu_seconds: int

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ResourceLimits":
        settings = settings or get_settings()
        return cls(
            memory_bytes=settings.rlimit_as_bytes,
            cpu_seconds=settings.rlimit_cpu_seconds,
        )

    def apply(self) -> None:
        """Set per-process resource limits before exec. No-op on Windows.

        Executes in the child process context after `fork()` but before
        `exec()`.
        """
        if sys.platform == "win32":
            return

        try:
            import resource

            if self.memory_bytes > 0:
                resource.setrlimit(
                    resource.RLIMIT_AS, (self.memory_bytes, resource.RLIM_INFINITY)
                )
            if self.cpu_seconds > 0:
                resource.setrlimit(
                    resource.RLIMIT_CPU, (self.cpu_seconds, resource.RLIM_INFINITY)
                )

            logger.debug(
                "Resource limits applied: mem=%s cpu=%s",
                f"{self.memory_bytes / (1024**3):.1f}GB" if self.memory_bytes else "unlimited",
                f"{self.cpu_seconds}s" if self.cpu_seconds else "unlimited",
            )

        except (ImportError, ValueError, OSError) as exc:
            logger.warning("Failed to apply resource limits: %s", exc)


def preexec_fn_for(limits: Optional[ResourceLimits]) -> Optional[Callable[[], None]]:
    """Return the preexec hook for limits, or None where rlimits are unsupported."""
    if limits is None or sys.platform == "win32":
        return None
    return limits.apply
