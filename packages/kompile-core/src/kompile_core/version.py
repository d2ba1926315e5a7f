"""Process-wide backend version descriptor.

The VersionInfo is set once at startup (usually by build_executor) and read
by the executor when reporting telemetry. Setting it again with an equal
value is a no-op; setting a different value is an error.
"""

from __future__ import annotations

import threading

import structlog

from kompile_core.errors import VersionAlreadySetError
from kompile_core.schemas.completion import VersionInfo

logger = structlog.get_logger(__name__)

_lock = threading.Lock()
_version_info: VersionInfo | None = None


def set_version_info(info: VersionInfo) -> VersionInfo:
    """Set the process-wide version descriptor.

    Args:
        info: Version descriptor.

    Returns:
        The descriptor now in effect.

    Raises:
        VersionAlreadySetError: If a different descriptor was already set.
    """
    global _version_info
    with _lock:
        if _version_info is not None and _version_info != info:
            raise VersionAlreadySetError(
                f"Version already set to {_version_info.version}",
                internal_details=f"attempted={info.model_dump()}",
            )
        if _version_info is None:
            logger.debug("version_set", version=info.version, stdlib_version=info.stdlib_version)
        _version_info = info
        return info


def get_version_info() -> VersionInfo | None:
    """Get the process-wide version descriptor, or None if not set yet."""
    return _version_info


def reset_version_info() -> None:
    """Forget the process-wide version descriptor. Intended for tests."""
    global _version_info
    with _lock:
        _version_info = None
