from __future__ import annotations
from pathlib import Path
from typing import Protocol, Sequence
from transpipe.domain.entities.stream import StreamDescriptor

class StreamProbePort(Protocol):
    # raises ProbeError when the file cannot be analyzed
    def probe(self, path: Path | str) -> Sequence[StreamDescriptor]: ...
