"""Shared fixtures for sparqllint tests."""

from __future__ import annotations

from typing import Dict, List, Tuple

import pytest

from sparqllint.errors import FormatterError
from sparqllint.models import FormatMode

SIMPLE_QUERY = "SELECT * WHERE { ?s ?p ?o }"


class MemoryProbe:
    """In-memory :class:`~sparqllint.resolver.FileProbe`."""

    def __init__(self, files: Dict[str, bytes] | None = None, unreadable: Tuple[str, ...] = ()):
        self.files = dict(files or {})
        self.unreadable = set(unreadable)
        self.probed: List[str] = []

    def exists(self, path: str) -> bool:
        self.probed.append(path)
        return path in self.files or path in self.unreadable

    def read_bytes(self, path: str) -> bytes:
        if path in self.unreadable:
            raise PermissionError(13, "Permission denied", path)
        return self.files[path]

    def base_uri(self, path: str) -> str:
        return f"file:///memory/{path}"


class FakeFormatter:
    """Formatter returning canned output and recording its calls."""

    def __init__(self, output: str = "FORMATTED", fail: bool = False):
        self.output = output
        self.fail = fail
        self.calls: List[Tuple[str, FormatMode]] = []

    def reformat(self, text: str, mode: FormatMode) -> str:
        self.calls.append((text, mode))
        if self.fail:
            raise FormatterError("Failed to parse query: canned failure")
        return f"{self.output}:{mode.value}"


@pytest.fixture()
def memory_probe():
    """Probe with one query file and one unreadable file."""
    return MemoryProbe(
        files={"query.rq": SIMPLE_QUERY.encode("utf-8")},
        unreadable=("secret.rq",),
    )


@pytest.fixture()
def fake_formatter():
    return FakeFormatter()


@pytest.fixture()
def query_file(tmp_path):
    """A query file on disk."""
    path = tmp_path / "query.rq"
    path.write_text(SIMPLE_QUERY, encoding="utf-8")
    return path
