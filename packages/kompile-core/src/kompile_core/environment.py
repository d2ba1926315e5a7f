"""Scoped compilation environments.

Backends need per-call compilation state (scratch space, caches, an
identifier for log correlation). An EnvironmentProvider hands out one
CompilationContext per executor call and guarantees its teardown on every
exit path, including exceptions raised by the backend.
"""

from __future__ import annotations

import shutil
import tempfile
import time
import uuid
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class CompilationContext:
    """Compilation state scoped to a single executor call.

    Attributes:
        context_id: Unique identifier, bound into log records.
        work_dir: Scratch directory owned by this context.
        created_at: When the context was acquired.
        attributes: Free-form slots backends may use during the call.
    """

    context_id: str
    work_dir: Path
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    attributes: dict[str, Any] = field(default_factory=dict)
    closed: bool = False


@runtime_checkable
class EnvironmentProvider(Protocol):
    """Hands out scoped compilation contexts."""

    def environment(self) -> AbstractContextManager[CompilationContext]:
        """Return a context manager yielding a CompilationContext."""
        ...


class LocalEnvironmentProvider:
    """Environment provider backed by a temporary directory per call.

    Each acquisition is independent, so concurrent calls are safe.

    Example:
        >>> provider = LocalEnvironmentProvider()
        >>> with provider.environment() as context:
        ...     (context.work_dir / "scratch.txt").write_text("...")
    """

    def __init__(self, base_dir: Path | str | None = None) -> None:
        """Initialize the provider.

        Args:
            base_dir: Parent directory for scratch directories. Defaults to
                the system temporary directory.
        """
        self.base_dir = Path(base_dir) if base_dir is not None else None

    @contextmanager
    def environment(self) -> Iterator[CompilationContext]:
        """Acquire a context for the duration of the ``with`` block."""
        context_id = uuid.uuid4().hex
        work_dir = Path(
            tempfile.mkdtemp(
                prefix=f"kompile-{context_id[:8]}-",
                dir=str(self.base_dir) if self.base_dir else None,
            )
        )
        context = CompilationContext(context_id=context_id, work_dir=work_dir)
        log = logger.bind(context_id=context_id)
        start_time = time.monotonic()
        log.debug("environment_acquired", work_dir=str(work_dir))
        try:
            yield context
        finally:
            context.closed = True
            shutil.rmtree(work_dir, ignore_errors=True)
            log.debug(
                "environment_released",
                duration_ms=int((time.monotonic() - start_time) * 1000),
            )
