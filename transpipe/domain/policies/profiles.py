# transpipe/domain/policies/profiles.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, Iterable, List, Optional

from transpipe.domain.entities.request import TranscodeRequest
from transpipe.domain.entities.stream import StreamDescriptor
from transpipe.domain.enums.profile import TranscodeProfile
from transpipe.domain.policies.codec_policy import stream_args

DurationFormatter = Callable[[timedelta], str]

PIPE_TARGET = "pipe:"
FRAGMENTED_MP4 = ("-movflags", "+faststart+frag_keyframe+empty_moov")


@dataclass(frozen=True)
class ProfileSpec:
    """How a profile is advertised to receivers."""
    profile: TranscodeProfile
    mime_type: str
    dlna_profile_name: Optional[str] = None


PROFILES: Dict[TranscodeProfile, ProfileSpec] = {
    TranscodeProfile.mpegts: ProfileSpec(TranscodeProfile.mpegts, "video/mpeg", "MPEG_PS_PAL"),
    TranscodeProfile.vp8: ProfileSpec(TranscodeProfile.vp8, "video/webm"),
    TranscodeProfile.chromecast: ProfileSpec(TranscodeProfile.chromecast, "video/mp4"),
    TranscodeProfile.web: ProfileSpec(TranscodeProfile.web, "video/mp4"),
}


# ---------------- time window ----------------
# NOTE: mpegts bounds the output for length >= 0 while every other profile
# only does so for length > 0, so a zero length means "empty output" for
# mpegts and "until the end" elsewhere. Kept as is until receivers are
# checked against a unified rule.

def _length_args(req: TranscodeRequest, fmt: DurationFormatter, *, include_zero: bool) -> List[str]:
    bounded = req.length >= timedelta(0) if include_zero else req.length > timedelta(0)
    return ["-t", fmt(req.length)] if bounded else []


# ---------------- builders ----------------

def build_mpegts_args(
    req: TranscodeRequest,
    streams: Iterable[StreamDescriptor],
    *,
    encoder: str,
    threads: int,
    fmt: DurationFormatter,
) -> List[str]:
    """MPEG transport stream for DLNA renderers, codecs chosen per probed stream."""
    args = [
        encoder,
        "-threads", str(threads),
        "-async", "1",
        "-ss", fmt(req.start),
    ]
    args += _length_args(req, fmt, include_zero=True)
    args += ["-i", str(req.path)]
    args += stream_args(streams)
    args += ["-f", "mpegts", PIPE_TARGET]
    return args


def build_vp8_args(req: TranscodeRequest, *, encoder: str, threads: int, fmt: DurationFormatter) -> List[str]:
    """WebM for older browser / Chromecast receivers."""
    args = [
        encoder,
        "-threads", str(threads),
        "-async", "1",
        "-ss", fmt(req.start),
    ]
    args += _length_args(req, fmt, include_zero=False)
    args += [
        "-i", str(req.path),
        "-f", "webm",
        PIPE_TARGET,
    ]
    return args


def build_chromecast_args(req: TranscodeRequest, *, encoder: str, fmt: DurationFormatter) -> List[str]:
    args = [
        encoder,
        "-ss", fmt(req.start),
        "-i", str(req.path),
        "-c:v", "libx264", "-preset", "ultrafast", "-profile:v", "high", "-level", "5.0",
        *FRAGMENTED_MP4,
    ]
    args += _length_args(req, fmt, include_zero=False)
    args += ["-f", "mp4", PIPE_TARGET]
    return args


def build_web_args(req: TranscodeRequest, *, encoder: str, fmt: DurationFormatter) -> List[str]:
    """H.264 video with mp3 audio in fragmented mp4, playable by plain <video> tags."""
    args = [
        encoder,
        "-ss", fmt(req.start),
        "-i", str(req.path),
        "-pix_fmt", "yuv420p",
        "-c:v", "libx264", "-crf", "25",
        "-c:a", "mp3", "-ab", "128k", "-ar", "44100",
        "-preset", "ultrafast",
        *FRAGMENTED_MP4,
    ]
    args += _length_args(req, fmt, include_zero=False)
    args += ["-f", "mp4", PIPE_TARGET]
    return args
