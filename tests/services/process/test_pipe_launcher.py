# tests/services/process/test_pipe_launcher.py
"""
Real subprocesses, with the running Python interpreter standing in for the encoder.
"""
from __future__ import annotations

import io
import logging
import sys
import threading

import pytest

from transpipe.common.concurrency.thread_manager import ThreadManager
from transpipe.domain.errors import LaunchError
from transpipe.services.process.pipe_launcher import PipeLauncher

WAIT = 20  # seconds; generous for slow CI

LOGGER_NAME = "tests.launcher"


def _py(code: str) -> list[str]:
    return [sys.executable, "-c", code]


@pytest.fixture()
def reapers():
    mgr = ThreadManager(name="test-reaper")
    yield mgr
    mgr.shutdown(wait=False)


@pytest.fixture()
def launcher(reapers):
    return PipeLauncher(logger=logging.getLogger(LOGGER_NAME), reapers=reapers)


def _failures(caplog):
    return [
        r for r in caplog.records
        if r.name == LOGGER_NAME and r.levelno >= logging.ERROR
    ]


def test_stdout_is_streamed_and_reaped(launcher, caplog):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    h = launcher.launch(_py("import sys; sys.stdout.write('hello'); sys.stdout.flush()"))

    assert h.read() == b"hello"
    assert h.reaper.result(timeout=WAIT) == 0
    assert _failures(caplog) == []
    # the command line itself is logged before start
    assert any("transcode command" in r.getMessage() for r in caplog.records)


def test_stream_is_readable_before_exit(launcher):
    h = launcher.launch(_py(
        "import sys, time; sys.stdout.write('x'); sys.stdout.flush(); time.sleep(2)"
    ))
    assert h.read(1) == b"x"
    assert not h.reaper.done()
    assert h.read() == b""
    assert h.reaper.result(timeout=WAIT) == 0


def test_nonzero_exit_is_logged_once_and_reader_sees_eof(launcher, caplog):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    h = launcher.launch(_py("import sys; sys.stdout.write('partial'); sys.stdout.flush(); sys.exit(3)"))

    assert h.read() == b"partial"   # no exception for the reader
    assert h.read() == b""
    assert h.reaper.result(timeout=WAIT) == 3

    fails = _failures(caplog)
    assert len(fails) == 1
    msg = fails[0].getMessage()
    assert "exit status 3" in msg
    assert sys.executable in msg    # tagged with the argv


def test_missing_binary_raises_and_starts_no_reaper(launcher, reapers):
    with pytest.raises(LaunchError) as ei:
        launcher.launch(["/nonexistent/dir/encoder-xyz", "-i", "a.mkv"])
    assert ei.value.argv == ("/nonexistent/dir/encoder-xyz", "-i", "a.mkv")
    assert reapers.stats().tasks_submitted == 0


def test_empty_argv_raises(launcher, reapers):
    with pytest.raises(LaunchError):
        launcher.launch([])
    assert reapers.stats().tasks_submitted == 0


def test_stdin_is_the_null_device(launcher):
    h = launcher.launch(_py("import sys; sys.stdout.write(repr(sys.stdin.read()))"))
    assert h.read() == b"''"
    h.reaper.result(timeout=WAIT)


def test_stderr_is_pumped_into_non_file_sink(launcher):
    sink = io.BytesIO()
    h = launcher.launch(_py("import sys; sys.stderr.write('frame=1 warn'); sys.stderr.flush()"), sink)
    assert h.read() == b""
    assert h.reaper.result(timeout=WAIT) == 0
    assert sink.getvalue() == b"frame=1 warn"


def test_stderr_goes_straight_to_file_sink(launcher, tmp_path):
    log_path = tmp_path / "encoder.log"
    with open(log_path, "wb") as sink:
        h = launcher.launch(_py("import sys; sys.stderr.write('to file'); sys.stderr.flush()"), sink)
        h.read()
        h.reaper.result(timeout=WAIT)
    assert log_path.read_bytes() == b"to file"


def test_failing_sink_does_not_block_child(launcher, caplog):
    class _Broken(io.RawIOBase):
        def writable(self):
            return True

        def write(self, b):
            raise OSError("disk full")

    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    code = "import sys; sys.stderr.write('e' * 200000); sys.stderr.flush(); sys.stdout.write('done')"
    h = launcher.launch(_py(code), _Broken())
    assert h.read() == b"done"
    assert h.reaper.result(timeout=WAIT) == 0
    fails = _failures(caplog)
    assert len(fails) == 1
    assert "disk full" in fails[0].getMessage()


def test_iter_chunks_collects_everything_and_closes(launcher):
    h = launcher.launch(_py("import sys; sys.stdout.write('ab' * 50000)"))
    data = b"".join(h.iter_chunks(4096))
    assert data == b"ab" * 50000
    assert h.closed
    h.reaper.result(timeout=WAIT)


def test_concurrent_launches_are_independent(launcher, caplog):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    slow = launcher.launch(_py("import time; time.sleep(60)"))
    fast = launcher.launch(_py("import sys; sys.stdout.write('ok')"))

    # the fast one finishes while the slow one is still running
    assert fast.read() == b"ok"
    assert fast.reaper.result(timeout=WAIT) == 0
    assert not slow.reaper.done()

    # killing the slow one only affects the slow one
    slow.process.kill()
    assert slow.read() == b""
    rc = slow.reaper.result(timeout=WAIT)
    assert rc != 0

    fails = _failures(caplog)
    assert len(fails) == 1
    assert "signal" in fails[0].getMessage()


def test_wait_error_is_logged_not_raised(launcher, caplog):
    class _Proc:
        stderr = None

        def wait(self):
            raise OSError("wait failed")

    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    assert launcher._reap(["enc"], _Proc(), None) is None
    fails = _failures(caplog)
    assert len(fails) == 1
    assert "wait failed" in fails[0].getMessage()


def test_long_running_encoders_do_not_stall_a_new_one(launcher):
    # every earlier reaper is still blocked on its child's exit
    slow = [launcher.launch(_py("import time; time.sleep(60)")) for _ in range(10)]
    sink = io.BytesIO()
    code = "import sys; sys.stderr.write('e' * 200000); sys.stderr.flush(); sys.stdout.write('ok')"
    fast = launcher.launch(_py(code), sink)

    got = {}
    reader = threading.Thread(target=lambda: got.setdefault("data", fast.read()), daemon=True)
    reader.start()
    reader.join(WAIT)
    try:
        assert got.get("data") == b"ok"
        assert fast.reaper.result(timeout=WAIT) == 0
        assert len(sink.getvalue()) == 200000
        assert not any(h.reaper.done() for h in slow)
    finally:
        for h in slow:
            h.process.kill()
            h.reaper.result(timeout=WAIT)
            h.close()


def test_handle_reports_pid_and_exit_status(launcher):
    h = launcher.launch(_py("import sys; sys.exit(0)"))
    assert h.pid == h.process.pid > 0
    assert h.readable()
    assert h.read() == b""
    assert h.reaper.result(timeout=WAIT) == 0
    assert h.returncode() == 0
