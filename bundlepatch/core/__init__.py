"""Process-wide settings and logging setup."""

from bundlepatch.core.config import Settings, get_settings
from bundlepatch.core.logging import bind_run_id, configure_structlog, get_run_id

__all__ = ["Settings", "get_settings", "bind_run_id", "configure_structlog", "get_run_id"]
