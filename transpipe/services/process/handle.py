# transpipe/services/process/handle.py
from __future__ import annotations

import subprocess
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, Optional, Tuple


@dataclass(eq=False)
class ProcessHandle:
    """
    A running encoder seen as a readable byte stream.

    Reads come from the child's stdout and block until bytes arrive or the
    child exits and the pipe is drained (then b"" is returned). Exit status
    is never reported here: the reaper future logs failures on its own and
    runs whether or not this handle is ever closed.
    """
    argv: Tuple[str, ...]
    process: subprocess.Popen = field(repr=False)
    reaper: Future = field(repr=False)

    @property
    def stdout(self) -> BinaryIO:
        return self.process.stdout  # type: ignore[return-value]

    @property
    def pid(self) -> int:
        return self.process.pid

    # ---- file-like API -------------------------------------------------------
    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        return self.stdout.read(size)

    def read1(self, size: int = -1) -> bytes:
        return self.stdout.read1(size)  # type: ignore[attr-defined]

    @property
    def closed(self) -> bool:
        return self.stdout.closed

    def close(self) -> None:
        """Stop reading. The child may get SIGPIPE on its next write."""
        self.stdout.close()

    def __enter__(self) -> "ProcessHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[bytes]:
        return self.iter_chunks()

    def iter_chunks(self, chunk_size: int = 64 * 1024) -> Iterator[bytes]:
        """Yield stdout as it becomes available; closes the stream when done or abandoned."""
        try:
            while True:
                chunk = self.read1(chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            self.close()

    # ---- introspection (tests, health) --------------------------------------
    def returncode(self) -> Optional[int]:
        """Exit status if the child has already been reaped, else None. Never blocks."""
        return self.process.returncode
