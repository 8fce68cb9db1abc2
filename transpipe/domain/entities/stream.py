# transpipe/domain/entities/stream.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from transpipe.domain.enums.codec_type import CodecType


@dataclass(frozen=True)
class StreamDescriptor:
    """
    One elementary stream of a probed source file.
    Produced (and validated) by a probe adapter; read-only afterwards.
    """
    index: int
    codec_type: CodecType = CodecType.unknown
    codec_name: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int) or self.index < 0:
            raise ValueError(f"stream index must be a non-negative int, got {self.index!r}")
