# transpipe/services/api/deps.py
from __future__ import annotations
from functools import lru_cache
from fastapi import Depends

from transpipe.domain.ports.launcher import PipeLauncherPort
from transpipe.domain.ports.probe import StreamProbePort
from transpipe.services.probe.ffprobe_adapter import FFprobeAdapter
from transpipe.services.process.pipe_launcher import PipeLauncher
from transpipe.services.transcode.service import TranscodeService


def get_stream_probe() -> StreamProbePort:
    """
    Provide a StreamProbePort implementation (ffprobe) via DI.
    Swappable later if you add other probers.
    """
    return FFprobeAdapter()


@lru_cache(maxsize=1)
def get_launcher() -> PipeLauncher:
    """One launcher (and its reaper threads) per process."""
    return PipeLauncher()


def get_transcode_service(
    probe: StreamProbePort = Depends(get_stream_probe),
    launcher: PipeLauncherPort = Depends(get_launcher),
) -> TranscodeService:
    return TranscodeService(probe, launcher)
