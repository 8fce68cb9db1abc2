from __future__ import annotations
from enum import StrEnum


class CodecType(StrEnum):
    video = "video"
    audio = "audio"
    subtitle = "subtitle"
    data = "data"
    attachment = "attachment"
    unknown = "unknown"

    @classmethod
    def parse(cls, value: object) -> "CodecType":
        """Map ffprobe's codec_type onto the enum; anything unrecognized is `unknown`."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.unknown
