from __future__ import annotations
from enum import StrEnum


class TranscodeProfile(StrEnum):
    mpegts = "mpegts"          # DLNA MPEG_PS_PAL renderers
    vp8 = "vp8"                # legacy web video (webm)
    chromecast = "chromecast"  # fragmented mp4, H.264 high@5.0
    web = "web"                # fragmented mp4, H.264 + mp3
