"""Tests for output sinks and atomic file writes."""

from __future__ import annotations

import io
import os
import stat

import pytest

from vstat.file_utils import write_text_atomic
from vstat.sink import FileSink, StdoutSink, open_sink


class TestWriteTextAtomic:
    def test_writes_content(self, tmp_path):
        path = tmp_path / "status.txt"
        write_text_atomic(path, "hello\n")
        assert path.read_text() == "hello\n"

    def test_replaces_existing_file(self, tmp_path):
        path = tmp_path / "status.txt"
        path.write_text("old content that is longer than the new one\n")
        write_text_atomic(path, "new\n")
        assert path.read_text() == "new\n"

    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "a" / "b" / "status.json"
        write_text_atomic(path, "{}")
        assert path.exists()

    def test_mode(self, tmp_path):
        path = tmp_path / "status.txt"
        write_text_atomic(path, "x", mode=0o644)
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o644

    def test_no_temp_files_left(self, tmp_path):
        path = tmp_path / "status.txt"
        for i in range(3):
            write_text_atomic(path, f"{i}\n")
        assert os.listdir(tmp_path) == ["status.txt"]

    def test_temp_file_removed_on_failure(self, tmp_path, monkeypatch):
        path = tmp_path / "status.txt"

        def boom(src, dst):
            raise OSError("rename failed")

        monkeypatch.setattr(os, "replace", boom)
        with pytest.raises(OSError, match="rename failed"):
            write_text_atomic(path, "x")
        assert os.listdir(tmp_path) == []


class TestSinks:
    def test_stdout_sink_stream(self):
        stream = io.StringIO()
        StdoutSink(stream).write("a\n")
        StdoutSink(stream).write("b\n")
        assert stream.getvalue() == "a\nb\n"

    def test_stdout_sink_default(self, capsys):
        StdoutSink().write("time: 1\n")
        assert capsys.readouterr().out == "time: 1\n"

    def test_file_sink_keeps_latest_only(self, tmp_path):
        sink = FileSink(tmp_path / "status.json")
        sink.write('{"width":1}\n')
        sink.write('{"width":2}\n')
        assert (tmp_path / "status.json").read_text() == '{"width":2}\n'

    def test_open_sink(self, tmp_path):
        assert isinstance(open_sink(None), StdoutSink)
        assert isinstance(open_sink(""), StdoutSink)
        sink = open_sink(str(tmp_path / "out"))
        assert isinstance(sink, FileSink)
        assert sink.path == tmp_path / "out"
