from transpipe.domain.enums.codec_type import CodecType
from transpipe.domain.enums.profile import TranscodeProfile
__all__ = [
    "CodecType",
    "TranscodeProfile",
]
