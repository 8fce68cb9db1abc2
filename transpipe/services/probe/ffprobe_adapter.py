# transpipe/services/probe/ffprobe_adapter.py
from __future__ import annotations

import json
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional

from transpipe.common.logging import get_logger
from transpipe.common.probe.ffprobe_helpers import build_ffprobe_cmd, parse_streams
from transpipe.common.settings import get_settings
from transpipe.domain.entities.stream import StreamDescriptor
from transpipe.domain.errors import ProbeError
from transpipe.domain.ports.probe import StreamProbePort

logger = get_logger(__name__)


class FFprobeAdapter(StreamProbePort):
    """
    Infrastructure adapter implementing StreamProbePort using `ffprobe`.
    Blocking; called on the request path before any encoder is launched.
    """

    def __init__(self, ffprobe_bin: Optional[str] = None, timeout_sec: Optional[int] = None):
        cfg = get_settings()
        self.ffprobe_bin = ffprobe_bin or cfg.ffprobe.bin
        self.timeout_sec = int(timeout_sec or cfg.ffprobe.timeout_sec or 15)
        self.log_level = cfg.ffprobe.log_level

    # ---- Port API -------------------------------------------------------------
    def probe(self, path: Path | str) -> List[StreamDescriptor]:
        if not path:
            raise ProbeError("No path provided to probe().")
        if not Path(path).is_file():
            raise ProbeError(f"File not found: {path}")

        cmd = build_ffprobe_cmd(path, ffprobe_bin=self.ffprobe_bin, log_level=self.log_level)
        logger.debug("ffprobe cmd: %s", " ".join(shlex.quote(p) for p in cmd))

        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_sec,
                check=False,  # we handle rc manually to attach stderr
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"ffprobe timed out after {self.timeout_sec}s", stderr=str(e)) from e
        except OSError as e:
            raise ProbeError("Failed to execute ffprobe (OS error).", stderr=str(e)) from e

        if proc.returncode != 0:
            raise ProbeError("ffprobe returned non-zero exit code", stderr=proc.stderr, rc=proc.returncode)

        try:
            data = json.loads(proc.stdout or "{}")
        except json.JSONDecodeError as e:
            raise ProbeError("ffprobe produced invalid JSON", stderr=proc.stdout) from e
        if not isinstance(data, dict):
            raise ProbeError("ffprobe produced unexpected JSON", stderr=proc.stdout)

        return parse_streams(data)
