# transpipe/domain/entities/request.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import BinaryIO, Optional


@dataclass(frozen=True)
class TranscodeRequest:
    """
    What to transcode and which time window of it.

    length < 0 means "until the end of the source". Whether a zero length
    bounds the output is decided per profile.
    stderr receives the encoder's diagnostic output (None discards it).
    """
    path: Path | str
    start: timedelta = timedelta(0)
    length: timedelta = timedelta(seconds=-1)
    stderr: Optional[BinaryIO] = None

    def __post_init__(self) -> None:
        if self.start < timedelta(0):
            raise ValueError(f"start offset must be >= 0, got {self.start!r}")

    @property
    def unbounded(self) -> bool:
        return self.length < timedelta(0)
