"""Tests for the zero-timeout InputPoller."""

import os

import pytest

from guardview.tui.keyboard import InputPoller, KeyEvent, ResizeEvent, is_quit


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    os.close(read_fd)
    os.close(write_fd)


class TestInputPoller:
    def test_no_input_returns_none(self, pipe):
        read_fd, _ = pipe
        assert InputPoller(read_fd).poll() is None

    def test_single_key(self, pipe):
        read_fd, write_fd = pipe
        os.write(write_fd, b"q")
        assert InputPoller(read_fd).poll() == KeyEvent("q")

    def test_keys_returned_one_per_poll(self, pipe):
        read_fd, write_fd = pipe
        os.write(write_fd, b"xq")
        poller = InputPoller(read_fd)

        assert poller.poll() == KeyEvent("x")
        assert poller.poll() == KeyEvent("q")
        assert poller.poll() is None

    def test_escape_sequence_is_one_key(self, pipe):
        read_fd, write_fd = pipe
        os.write(write_fd, b"\x1b[A")
        poller = InputPoller(read_fd)

        assert poller.poll() == KeyEvent("\x1b[A")
        assert poller.poll() is None

    @pytest.mark.parametrize(
        "data,sequence",
        [
            (b"\x1b[Aq", "\x1b[A"),
            (b"\x1b[<0;10;5Mq", "\x1b[<0;10;5M"),
            (b"\x1b[<0;10;5mq", "\x1b[<0;10;5m"),
            (b"\x1b[15~q", "\x1b[15~"),
            (b"\x1bOPq", "\x1bOP"),
            (b"\x1b[M !!q", "\x1b[M !!"),
        ],
    )
    def test_key_after_escape_sequence_is_kept(self, pipe, data, sequence):
        read_fd, write_fd = pipe
        os.write(write_fd, data)
        poller = InputPoller(read_fd)

        assert poller.poll() == KeyEvent(sequence)
        event = poller.poll()
        assert event == KeyEvent("q")
        assert is_quit(event)
        assert poller.poll() is None

    def test_consecutive_mouse_reports(self, pipe):
        read_fd, write_fd = pipe
        os.write(write_fd, b"\x1b[<0;1;1M\x1b[<0;1;1mQ")
        poller = InputPoller(read_fd)

        assert poller.poll() == KeyEvent("\x1b[<0;1;1M")
        assert poller.poll() == KeyEvent("\x1b[<0;1;1m")
        assert poller.poll() == KeyEvent("Q")

    def test_alt_key_and_lone_escape(self, pipe):
        read_fd, write_fd = pipe
        os.write(write_fd, b"\x1bxq")
        poller = InputPoller(read_fd)

        assert poller.poll() == KeyEvent("\x1bx")
        assert poller.poll() == KeyEvent("q")

        os.write(write_fd, b"\x1b")
        assert poller.poll() == KeyEvent("\x1b")

    def test_resize_reported_once(self):
        poller = InputPoller(None)
        poller.notify_resize()

        assert poller.poll() == ResizeEvent()
        assert poller.poll() is None

    def test_without_fd_never_reads(self):
        assert InputPoller(None).poll() is None


class TestIsQuit:
    @pytest.mark.parametrize("key", ["q", "Q", "\x03"])
    def test_quit_keys(self, key):
        assert is_quit(KeyEvent(key))

    @pytest.mark.parametrize("key", ["x", "c", "\x1b", " "])
    def test_other_keys(self, key):
        assert not is_quit(KeyEvent(key))

    def test_resize_and_nothing_are_not_quit(self):
        assert not is_quit(ResizeEvent())
        assert not is_quit(None)

    def test_ctrl_c_flag(self):
        assert KeyEvent("\x03").is_ctrl_c
        assert not KeyEvent("c").is_ctrl_c
