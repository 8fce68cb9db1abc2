# transpipe/services/process/pipe_launcher.py
from __future__ import annotations

import logging
import signal
import subprocess
from typing import BinaryIO, List, Optional, Sequence, Tuple

from transpipe.common.concurrency.thread_manager import ThreadManager
from transpipe.common.logging import get_logger
from transpipe.domain.errors import LaunchError
from transpipe.domain.ports.launcher import PipeLauncherPort
from transpipe.services.process.handle import ProcessHandle

_PUMP_CHUNK = 8192


def _describe_exit(rc: int) -> str:
    if rc < 0:
        try:
            return f"signal: {signal.Signals(-rc).name}"
        except ValueError:
            return f"signal: {-rc}"
    return f"exit status {rc}"


def _stderr_target(sink: Optional[BinaryIO]) -> Tuple[object, bool]:
    """
    Where the child's stderr goes, and whether the reaper has to pump it.
    Sinks backed by a file descriptor are handed to the child directly.
    """
    if sink is None:
        return subprocess.DEVNULL, False
    try:
        sink.fileno()
    except (AttributeError, OSError, ValueError):
        return subprocess.PIPE, True
    sink.flush()
    return sink, False


def _pump(src: BinaryIO, sink: BinaryIO) -> Optional[Exception]:
    """
    Copy src into sink until EOF. After the first failed write the rest is
    read and dropped so the child never blocks on a full stderr pipe.
    """
    err: Optional[Exception] = None
    with src:
        for chunk in iter(lambda: src.read1(_PUMP_CHUNK), b""):  # type: ignore[attr-defined]
            if err is not None:
                continue
            try:
                sink.write(chunk)
            except (OSError, ValueError, TypeError) as e:
                err = e
    return err


class PipeLauncher(PipeLauncherPort):
    """
    Starts an encoder and hands back its stdout right away.

    Each successful launch submits one reaper task that waits for the child
    to exit and logs a failure (non-zero status, signal, wait error) exactly
    once. Nothing after a successful launch is ever raised to the caller.
    """

    def __init__(
        self,
        *,
        logger: Optional[logging.Logger] = None,
        reapers: Optional[ThreadManager] = None,
    ) -> None:
        self.logger = logger or get_logger("transpipe.launcher")
        self.reapers = reapers or ThreadManager(name="reaper")

    def launch(self, argv: Sequence[str], stderr: Optional[BinaryIO] = None) -> ProcessHandle:
        args: List[str] = [str(a) for a in argv]
        if not args:
            raise LaunchError("empty command", argv=args)

        self.logger.info("transcode command: %s", args)
        target, pumped = _stderr_target(stderr)
        try:
            proc = subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=target,
            )
        except (OSError, ValueError) as e:
            raise LaunchError(f"failed to start {args[0]!r}: {e}", argv=args) from e

        try:
            reaper = self.reapers.submit(self._reap, args, proc, stderr if pumped else None)
        except RuntimeError as e:
            proc.kill()
            proc.wait()
            for pipe in (proc.stdout, proc.stderr):
                if pipe is not None:
                    pipe.close()
            raise LaunchError(f"cannot watch {args[0]!r}: {e}", argv=args) from e

        return ProcessHandle(argv=tuple(args), process=proc, reaper=reaper)

    def shutdown(self, wait: bool = True) -> None:
        self.reapers.shutdown(wait=wait)

    # ---- reaper ----------------------------------------------------------------
    def _reap(self, argv: List[str], proc: subprocess.Popen, sink: Optional[BinaryIO]) -> Optional[int]:
        copy_err: Optional[Exception] = None
        try:
            if sink is not None and proc.stderr is not None:
                copy_err = _pump(proc.stderr, sink)
            rc = proc.wait()
        except Exception as e:
            self.logger.error("command %s failed: %s", argv, e)
            return None

        if rc != 0:
            self.logger.error("command %s failed: %s", argv, _describe_exit(rc))
        elif copy_err is not None:
            self.logger.error("command %s failed: copying stderr: %s", argv, copy_err)
        return rc
