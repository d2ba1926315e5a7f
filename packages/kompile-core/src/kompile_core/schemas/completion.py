"""Completion and version models for kompile."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Completion(BaseModel):
    """A single completion proposal.

    Attributes:
        text: Text inserted on acceptance.
        display_text: Text shown in the proposal list.
        tail: Trailing hint (usually the type).
        import_: Import to add on acceptance (JSON key: "import").
        icon: Icon hint for the editor.
        has_other_imports: Other candidate imports exist for the same name.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    text: str
    display_text: str
    tail: str = ""
    import_: str | None = Field(default=None, alias="import")
    icon: str = ""
    has_other_imports: bool = False


class VersionInfo(BaseModel):
    """Backend/toolchain descriptor.

    Attributes:
        version: Compiler version string reported with telemetry.
        stdlib_version: Standard library version bundled with the backends.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    version: str = Field(..., min_length=1)
    stdlib_version: str = Field(..., min_length=1)
