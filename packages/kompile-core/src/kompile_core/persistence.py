"""Artifact persistence.

Writes compiled artifacts, or the diagnostics report when compilation
failed, to an output directory. Writes are idempotent: a re-run overwrites
the same files. I/O errors are not caught here and reach the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path, PurePosixPath

import structlog

from kompile_core.diagnostics import render_report
from kompile_core.errors import PersistenceError
from kompile_core.schemas import CompilerDiagnostics

logger = structlog.get_logger(__name__)

ERROR_FILE_NAME = "compile.err"
"""File name of the diagnostics report written on failed compilation."""


def _resolve_artifact_path(output_dir: Path, relative_path: str) -> Path:
    """Resolve an artifact's relative path under ``output_dir``.

    Raises:
        PersistenceError: If the path is absolute or escapes ``output_dir``.
    """
    posix = PurePosixPath(relative_path.replace("\\", "/"))
    if not relative_path or posix.is_absolute() or ".." in posix.parts:
        raise PersistenceError(relative_path, "path must be relative to the output directory")
    return output_dir.joinpath(*posix.parts)


def save_classes_to_directory(files: Mapping[str, bytes], output_dir: Path | str) -> list[Path]:
    """Write every artifact to ``output_dir``, preserving its relative path.

    Args:
        files: Relative path -> content.
        output_dir: Target directory, created if missing.

    Returns:
        Paths written, in mapping order.

    Raises:
        PersistenceError: If an artifact path is absolute or escapes the directory.
        OSError: If a directory or file cannot be written.

    Example:
        >>> save_classes_to_directory({"pkg/MainKt.class": b"\\xca\\xfe"}, "out")
        [PosixPath('out/pkg/MainKt.class')]
    """
    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for relative_path, content in files.items():
        target = _resolve_artifact_path(output, relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        written.append(target)

    logger.info("artifacts_saved", output_dir=str(output), count=len(written))
    return written


def save_errors_to_file(diagnostics: CompilerDiagnostics, output_dir: Path | str) -> Path:
    """Write the diagnostics report to ``output_dir/compile.err``.

    Args:
        diagnostics: Diagnostics to render.
        output_dir: Target directory, created if missing.

    Returns:
        Path of the written report.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)

    report_path = output / ERROR_FILE_NAME
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(render_report(diagnostics), encoding="utf-8", newline="\n")

    logger.info(
        "errors_saved",
        path=str(report_path),
        diagnostics=diagnostics.count(),
    )
    return report_path
