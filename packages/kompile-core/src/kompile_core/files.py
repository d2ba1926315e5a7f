"""File materializer.

Turns the caller's named text sources into backend-ready handles bound to
one compilation context. Handles must not outlive the call that created
them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kompile_core.environment import CompilationContext
    from kompile_core.schemas import Project


@dataclass(frozen=True)
class SourceHandle:
    """A source file bound to a compilation context.

    Attributes:
        name: File name as declared in the project.
        text: Source text with line endings normalized to "\\n".
        context: The context the handle belongs to.
    """

    name: str
    text: str
    context: CompilationContext

    @classmethod
    def from_source(cls, context: CompilationContext, name: str, text: str) -> SourceHandle:
        """Materialize a named text source inside ``context``."""
        return cls(name=name, text=text.replace("\r\n", "\n"), context=context)

    @property
    def lines(self) -> list[str]:
        """Source lines without terminators. An empty file has one empty line."""
        return self.text.split("\n")

    def contains_position(self, line: int, character: int) -> bool:
        """Check if a 0-based position lies inside the file.

        The position just past the last character of a line is valid, since
        that is where the cursor sits while typing.
        """
        lines = self.lines
        if line < 0 or character < 0 or line >= len(lines):
            return False
        return character <= len(lines[line])


def materialize(project: Project, context: CompilationContext) -> list[SourceHandle]:
    """Materialize every file of ``project`` in declaration order."""
    return [SourceHandle.from_source(context, f.name, f.text) for f in project.files]
