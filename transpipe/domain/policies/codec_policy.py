# transpipe/domain/policies/codec_policy.py
from __future__ import annotations

from typing import Iterable, List

from transpipe.domain.entities.directive import EncoderDirective
from transpipe.domain.entities.stream import StreamDescriptor
from transpipe.domain.enums.codec_type import CodecType

# Named ffmpeg target; implies codec, bitrate and frame size for the video stream.
VIDEO_TARGET = ("-target", "pal-dvd")
# DTS is not playable on most DLNA renderers: downmix to stereo AC-3.
DTS_CODEC = "dca"
DTS_TO_AC3 = ("-acodec", "ac3", "-ab", "224k", "-ac", "2")
AUDIO_COPY = ("-acodec", "copy")
SUBTITLE_COPY = ("-scodec", "copy")


def select_directive(stream: StreamDescriptor) -> EncoderDirective:
    """
    Pick encoder flags for one probed stream.

      video    -> fixed target profile (source codec is not inspected)
      audio    -> dca is transcoded to AC-3, everything else copied
      subtitle -> copied
      other    -> empty directive; the stream is dropped from the output
    """
    if stream.codec_type is CodecType.video:
        flags = VIDEO_TARGET
    elif stream.codec_type is CodecType.audio:
        flags = DTS_TO_AC3 if stream.codec_name == DTS_CODEC else AUDIO_COPY
    elif stream.codec_type is CodecType.subtitle:
        flags = SUBTITLE_COPY
    else:
        flags = ()
    return EncoderDirective(stream_index=stream.index, flags=flags)


def stream_args(streams: Iterable[StreamDescriptor]) -> List[str]:
    """Concatenated directives for every stream, in probe order."""
    out: List[str] = []
    for s in streams:
        out.extend(select_directive(s).as_args())
    return out
