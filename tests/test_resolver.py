"""Tests for query source resolution."""

from __future__ import annotations

import io

import pytest

from sparqllint.errors import QueryEncodingError, QuerySourceError
from sparqllint.models import FileSource, LiteralSource, StdinSource
from sparqllint.resolver import LocalFileProbe, decode_bytes, read_query, resolve_source

from conftest import SIMPLE_QUERY


class TestResolveSource:
    """Classification of an argument as file, literal or stdin."""

    def test_reachable_path_is_file(self, memory_probe):
        source = resolve_source("query.rq", memory_probe)
        assert isinstance(source, FileSource)
        assert source.base_uri == "file:///memory/query.rq"

    def test_unreachable_path_is_literal(self, memory_probe):
        source = resolve_source(SIMPLE_QUERY, memory_probe)
        assert isinstance(source, LiteralSource)
        assert source.text == SIMPLE_QUERY

    def test_probe_called_once(self, memory_probe):
        resolve_source(SIMPLE_QUERY, memory_probe)
        assert memory_probe.probed == [SIMPLE_QUERY]

    def test_dash_is_stdin(self, memory_probe):
        assert isinstance(resolve_source("-", memory_probe), StdinSource)
        assert memory_probe.probed == []

    def test_unencodable_literal(self, memory_probe):
        with pytest.raises(QueryEncodingError):
            resolve_source("SELECT \udcff", memory_probe)


class TestReadQuery:
    """Loading raw query bytes."""

    def test_file_bytes_and_base_uri(self, query_file):
        resolved = read_query(str(query_file))
        assert resolved.data == SIMPLE_QUERY.encode("utf-8")
        assert resolved.base_uri == query_file.absolute().as_uri()
        assert resolved.base_uri.startswith("file://")
        assert resolved.source.kind == "file"

    def test_relative_path_gets_absolute_base_uri(self, query_file, monkeypatch):
        monkeypatch.chdir(query_file.parent)
        resolved = read_query("query.rq")
        assert resolved.base_uri == query_file.absolute().as_uri()

    def test_literal_bytes_without_base_uri(self, memory_probe):
        resolved = read_query(SIMPLE_QUERY, probe=memory_probe)
        assert resolved.data == SIMPLE_QUERY.encode("utf-8")
        assert resolved.base_uri is None
        assert resolved.source.kind == "literal"

    def test_literal_non_ascii(self, memory_probe):
        query = 'SELECT * WHERE { ?s ?p "café" }'
        resolved = read_query(query, probe=memory_probe)
        assert resolved.data == query.encode("utf-8")

    def test_in_memory_file(self, memory_probe):
        resolved = read_query("query.rq", probe=memory_probe)
        assert resolved.data == SIMPLE_QUERY.encode("utf-8")
        assert resolved.base_uri == "file:///memory/query.rq"

    def test_unreadable_file(self, memory_probe):
        with pytest.raises(QuerySourceError, match="secret.rq"):
            read_query("secret.rq", probe=memory_probe)

    def test_directory_is_reachable_but_unreadable(self, tmp_path):
        with pytest.raises(QuerySourceError):
            read_query(str(tmp_path))

    def test_stdin(self, memory_probe):
        resolved = read_query("-", probe=memory_probe, stdin=io.BytesIO(b"ASK {}"))
        assert resolved.data == b"ASK {}"
        assert resolved.base_uri is None


class TestLocalFileProbe:
    """The filesystem probe never raises."""

    def test_missing(self, tmp_path):
        assert LocalFileProbe().exists(str(tmp_path / "missing.rq")) is False

    def test_name_too_long(self):
        assert LocalFileProbe().exists("SELECT " * 2000) is False

    def test_embedded_nul(self):
        assert LocalFileProbe().exists("SELECT\x00") is False

    def test_existing(self, query_file):
        assert LocalFileProbe().exists(str(query_file)) is True


class TestDecodeBytes:
    def test_valid(self):
        assert decode_bytes("ASK { ?s ?p \"é\" }".encode("utf-8")) == 'ASK { ?s ?p "é" }'

    def test_invalid(self):
        with pytest.raises(QueryEncodingError):
            decode_bytes(b"SELECT \xff\xfe")
