# transpipe/services/transcode/service.py
from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from transpipe.common.logging import get_logger
from transpipe.common.settings import Settings, get_settings
from transpipe.common.strings.cmdline import parse_command_line
from transpipe.common.strings.durations import format_duration_sexagesimal
from transpipe.domain.entities.request import TranscodeRequest
from transpipe.domain.enums.profile import TranscodeProfile
from transpipe.domain.policies.profiles import (
    DurationFormatter,
    build_chromecast_args,
    build_mpegts_args,
    build_vp8_args,
    build_web_args,
)
from transpipe.domain.ports.launcher import PipeLauncherPort
from transpipe.domain.ports.probe import StreamProbePort
from transpipe.services.process.handle import ProcessHandle

logger = get_logger(__name__)

TranscodeFn = Callable[[Path | str, timedelta, timedelta, Optional[BinaryIO]], ProcessHandle]


class TranscodeService:
    """
    Caller-facing entry points: one per output profile plus the ad-hoc
    command path used by dynamic streams.

    Every method returns as soon as the encoder has started. ProbeError,
    LaunchError and TokenizeError are raised before anything runs; later
    failures only show up in the launcher's log and as a short read.
    """

    def __init__(
        self,
        probe: StreamProbePort,
        launcher: PipeLauncherPort,
        *,
        settings: Optional[Settings] = None,
        fmt: DurationFormatter = format_duration_sexagesimal,
    ) -> None:
        self.probe = probe
        self.launcher = launcher
        self.cfg = settings or get_settings()
        self.fmt = fmt

    @property
    def threads(self) -> int:
        return self.cfg.encoder.threads or os.cpu_count() or 1

    # ---------------- profiles ----------------

    def transcode(
        self, path: Path | str, start: timedelta, length: timedelta, stderr: Optional[BinaryIO] = None
    ) -> ProcessHandle:
        """MPEG-TS for DLNA renderers (MPEG_PS_PAL). Probes the source first."""
        req = TranscodeRequest(path=path, start=start, length=length, stderr=stderr)
        streams = self.probe.probe(req.path)
        argv = build_mpegts_args(
            req, streams, encoder=self.cfg.encoder.ffmpeg_bin, threads=self.threads, fmt=self.fmt
        )
        return self.launcher.launch(argv, req.stderr)

    def vp8_transcode(
        self, path: Path | str, start: timedelta, length: timedelta, stderr: Optional[BinaryIO] = None
    ) -> ProcessHandle:
        req = TranscodeRequest(path=path, start=start, length=length, stderr=stderr)
        argv = build_vp8_args(req, encoder=self.cfg.encoder.avconv_bin, threads=self.threads, fmt=self.fmt)
        return self.launcher.launch(argv, req.stderr)

    def chromecast_transcode(
        self, path: Path | str, start: timedelta, length: timedelta, stderr: Optional[BinaryIO] = None
    ) -> ProcessHandle:
        req = TranscodeRequest(path=path, start=start, length=length, stderr=stderr)
        argv = build_chromecast_args(req, encoder=self.cfg.encoder.ffmpeg_bin, fmt=self.fmt)
        return self.launcher.launch(argv, req.stderr)

    def web_transcode(
        self, path: Path | str, start: timedelta, length: timedelta, stderr: Optional[BinaryIO] = None
    ) -> ProcessHandle:
        req = TranscodeRequest(path=path, start=start, length=length, stderr=stderr)
        argv = build_web_args(req, encoder=self.cfg.encoder.ffmpeg_bin, fmt=self.fmt)
        return self.launcher.launch(argv, req.stderr)

    def run_profile(
        self,
        profile: TranscodeProfile | str,
        path: Path | str,
        start: timedelta = timedelta(0),
        length: timedelta = timedelta(seconds=-1),
        stderr: Optional[BinaryIO] = None,
    ) -> ProcessHandle:
        """Dispatch by profile name. Unknown names raise ValueError."""
        fn = self._by_profile()[TranscodeProfile(profile)]
        return fn(path, start, length, stderr)

    def _by_profile(self) -> dict[TranscodeProfile, TranscodeFn]:
        return {
            TranscodeProfile.mpegts: self.transcode,
            TranscodeProfile.vp8: self.vp8_transcode,
            TranscodeProfile.chromecast: self.chromecast_transcode,
            TranscodeProfile.web: self.web_transcode,
        }

    # ---------------- dynamic streams ----------------

    def exec_command(
        self,
        command: str,
        start: timedelta = timedelta(0),
        length: timedelta = timedelta(seconds=-1),
        stderr: Optional[BinaryIO] = None,
    ) -> ProcessHandle:
        """
        Run a user-configured command line and stream its stdout.
        No seeking: start and length are accepted for signature parity and ignored.
        """
        argv = parse_command_line(command)
        logger.debug("dynamic stream %r -> %s", command, argv)
        return self.launcher.launch(argv, stderr)
