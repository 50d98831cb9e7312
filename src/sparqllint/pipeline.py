"""
The resolve, decode and reformat pipeline.

:func:`run_pipeline` never raises for bad input: the first failing stage and
its message are reported in the returned :class:`~sparqllint.models.LintResult`.
:func:`reformat_query` is the raising variant for library use, and
:func:`reformat_lines` handles a stream holding one query per line.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterable, Iterator, Optional, Tuple

from .decode import decode_query
from .errors import SparqlLintError
from .formatter import Formatter, SparqlFormatter
from .models import FormatMode, LintOptions, LintResult, PipelineStage
from .resolver import FileProbe, decode_bytes, read_query

__all__ = [
    "reformat_lines",
    "reformat_query",
    "run_pipeline",
]

logger = logging.getLogger(__name__)


class _StageRunner:
    """Runs the stages in order and remembers how far it got."""

    def __init__(self, options: LintOptions, formatter: Optional[Formatter] = None) -> None:
        self.options = options
        self.formatter = formatter or SparqlFormatter()
        self.stage = PipelineStage.RESOLVE
        self.base_uri: Optional[str] = None

    def run(
        self,
        argument: str,
        probe: Optional[FileProbe] = None,
        stdin: Optional[BinaryIO] = None,
    ) -> str:
        self.stage = PipelineStage.RESOLVE
        resolved = read_query(argument, probe=probe, stdin=stdin)
        self.base_uri = resolved.base_uri
        if self.base_uri:
            logger.debug(f"Query base URI: {self.base_uri}")
        return self.run_bytes(resolved.data)

    def run_bytes(self, data: bytes) -> str:
        self.stage = PipelineStage.RESOLVE
        text = decode_bytes(data)

        self.stage = PipelineStage.DECODE
        text = decode_query(text, self.options.decode)

        self.stage = PipelineStage.REFORMAT
        return self.formatter.reformat(text, self.options.mode)

    def failure(self, error: SparqlLintError) -> LintResult:
        logger.debug(f"Pipeline failed during {self.stage.value}: {error}")
        return LintResult(error=str(error), stage=self.stage, base_uri=self.base_uri)


def run_pipeline(
    argument: str,
    options: Optional[LintOptions] = None,
    *,
    formatter: Optional[Formatter] = None,
    probe: Optional[FileProbe] = None,
    stdin: Optional[BinaryIO] = None,
) -> LintResult:
    """Resolve ``argument``, optionally URL-decode it, and reformat it.

    Parameters
    ----------
    argument:
        Query file path, query text, or ``-`` for standard input.
    options:
        Format mode and decode flag; pretty, undecoded output by default.
    formatter:
        Reformatting capability, :class:`SparqlFormatter` by default.
    probe:
        Filesystem capability used to classify ``argument``.
    stdin:
        Binary stream read when ``argument`` is ``-``.

    Returns
    -------
    LintResult
        ``output`` on success; otherwise ``error`` and the failing ``stage``.
    """
    runner = _StageRunner(options or LintOptions(), formatter)
    try:
        output = runner.run(argument, probe=probe, stdin=stdin)
    except SparqlLintError as e:
        return runner.failure(e)

    return LintResult(output=output, base_uri=runner.base_uri)


def reformat_lines(
    lines: Iterable[bytes],
    options: Optional[LintOptions] = None,
    *,
    formatter: Optional[Formatter] = None,
) -> Iterator[Tuple[int, LintResult]]:
    """Reformat each non-blank line of ``lines`` as a query of its own.

    Typical input is a log of URL-encoded queries read with ``-d``. A failing
    line does not stop the others.

    Yields:
        ``(line_number, result)`` pairs, line numbers starting at 1
    """
    runner = _StageRunner(options or LintOptions(), formatter)
    for number, line in enumerate(lines, start=1):
        line = line.rstrip(b"\r\n")
        if not line.strip():
            continue
        try:
            yield number, LintResult(output=runner.run_bytes(line))
        except SparqlLintError as e:
            yield number, runner.failure(e)


def reformat_query(
    argument: str,
    mode: FormatMode = FormatMode.PRETTY,
    decode: bool = False,
    formatter: Optional[Formatter] = None,
) -> str:
    """Return the reformatted query named by ``argument``.

    Raises:
        SparqlLintError: Any stage failed
    """
    return _StageRunner(LintOptions(mode=mode, decode=decode), formatter).run(argument)
