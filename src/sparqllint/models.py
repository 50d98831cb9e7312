"""
Pydantic models for the query-source and reformatting pipeline.

Every model is frozen: values are built once per invocation and are
read-only afterwards.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "FileSource",
    "FormatMode",
    "LintOptions",
    "LintResult",
    "LiteralSource",
    "PipelineStage",
    "QuerySource",
    "ResolvedQuery",
    "StdinSource",
]


class FormatMode(str, Enum):
    """Output layout of the reformatted query."""

    PRETTY = "pretty"
    CONCISE = "concise"

    @property
    def pretty(self) -> bool:
        return self is FormatMode.PRETTY


class PipelineStage(str, Enum):
    """Pipeline stage that produced a failure."""

    RESOLVE = "resolve"
    DECODE = "decode"
    REFORMAT = "reformat"


class FileSource(BaseModel):
    """The argument named a reachable file."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    path: str = Field(..., description="Path as given on the command line")
    base_uri: str = Field(..., description="Absolute file:// URI of the path")


class LiteralSource(BaseModel):
    """The argument is the query text itself."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    text: str


class StdinSource(BaseModel):
    """The query is read from standard input."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["stdin"] = "stdin"


QuerySource = Annotated[
    Union[FileSource, LiteralSource, StdinSource],
    Field(discriminator="kind"),
]


class ResolvedQuery(BaseModel):
    """Raw query bytes together with the source they came from."""

    model_config = ConfigDict(frozen=True)

    source: QuerySource
    data: bytes
    base_uri: Optional[str] = None


class LintOptions(BaseModel):
    """Settings selected from command line flags."""

    model_config = ConfigDict(frozen=True)

    mode: FormatMode = FormatMode.PRETTY
    decode: bool = False
    lines: bool = Field(False, description="Read one query per line from standard input")
    verbose: bool = False
    show_help: bool = False
    argument: Optional[str] = Field(None, description="Query file path or literal")


class LintResult(BaseModel):
    """Outcome of one pipeline run: either ``output`` or ``error`` is set."""

    model_config = ConfigDict(frozen=True)

    output: Optional[str] = None
    error: Optional[str] = None
    stage: Optional[PipelineStage] = None
    base_uri: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
