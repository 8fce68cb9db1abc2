# transpipe/domain/errors.py
from __future__ import annotations

from typing import Optional, Sequence, Tuple


class TranscodeError(RuntimeError):
    """Base for every failure raised before an encoder is running."""


class ProbeError(TranscodeError):
    """Source metadata could not be obtained; nothing was launched."""

    def __init__(self, message: str, *, stderr: Optional[str] = None, rc: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.stderr = stderr
        self.rc = rc


class LaunchError(TranscodeError):
    """Pipe creation or process start failed; no reaper was started."""

    def __init__(self, message: str, *, argv: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.argv: Tuple[str, ...] = tuple(argv)


class TokenizeError(TranscodeError, ValueError):
    """An ad-hoc command line could not be split into arguments."""

    def __init__(self, message: str, *, command: str) -> None:
        super().__init__(message)
        self.message = message
        self.command = command
