from __future__ import annotations
from typing import BinaryIO, Optional, Protocol, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from transpipe.services.process.handle import ProcessHandle

class PipeLauncherPort(Protocol):
    # raises LaunchError; later failures are only logged
    def launch(self, argv: Sequence[str], stderr: Optional[BinaryIO] = None) -> "ProcessHandle": ...
