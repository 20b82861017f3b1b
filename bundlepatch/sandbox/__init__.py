"""Host-level concerns for external tool processes.

The permissions module is not re-exported here: it depends on the tools
layer, which imports limits from this package.
"""

from bundlepatch.sandbox.limits import ResourceLimits, preexec_fn_for

__all__ = ["ResourceLimits", "preexec_fn_for"]
