# transpipe/domain/entities/directive.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class EncoderDirective:
    """
    Encoder flags chosen for one source stream.
    An empty directive means "leave this stream out of the output".
    """
    stream_index: int
    flags: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.flags

    def as_args(self) -> List[str]:
        """Flags followed by the -map selector binding them to the source stream."""
        if self.is_empty:
            return []
        return [*self.flags, "-map", f"0:{self.stream_index}"]
