import os

import pytest

from bigclock.terminal import ESC, KeyReader, is_exit_key


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb", buffering=0)
    writer = os.fdopen(write_fd, "w", buffering=1)
    yield reader, writer
    reader.close()
    if not writer.closed:
        writer.close()


@pytest.mark.parametrize("key, expected", [("q", True), ("Q", True), (ESC, True), ("\x03", True), ("x", False), ("\x1b[A", False), (None, False)])
def test_is_exit_key(key, expected):
    assert is_exit_key(key) is expected


def test_poll_times_out(pipe):
    reader, _ = pipe
    with KeyReader(reader) as keys:
        assert keys.poll(0.01) is None


def test_poll_reads_single_key(pipe):
    reader, writer = pipe
    writer.write("q")
    writer.flush()
    with KeyReader(reader) as keys:
        assert keys.poll(0.5) == "q"


def test_lone_escape(pipe):
    reader, writer = pipe
    writer.write(ESC)
    writer.flush()
    with KeyReader(reader) as keys:
        assert keys.poll(0.5) == ESC


def test_escape_sequence_read_whole(pipe):
    reader, writer = pipe
    writer.write("\x1b[A")
    writer.flush()
    with KeyReader(reader) as keys:
        assert keys.poll(0.5) == "\x1b[A"


def test_eof_stops_reading(pipe):
    reader, writer = pipe
    writer.close()
    with KeyReader(reader) as keys:
        assert keys.poll(0.01) is None
        assert keys.poll(0.01) is None


def test_non_tty_leaves_terminal_alone(pipe):
    reader, _ = pipe
    keys = KeyReader(reader)
    with keys:
        assert keys._saved_settings is None
