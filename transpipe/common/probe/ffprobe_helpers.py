# transpipe/common/probe/ffprobe_helpers.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from transpipe.domain.entities.stream import StreamDescriptor
from transpipe.domain.enums.codec_type import CodecType
from transpipe.domain.errors import ProbeError


def build_ffprobe_cmd(
    input_path: str | Path,
    *,
    ffprobe_bin: str = "ffprobe",
    log_level: str = "error",
    extra_args: Iterable[str] | None = None,
) -> List[str]:
    """
    Build a robust ffprobe command that emits JSON we can parse consistently.
    """
    if isinstance(input_path, Path):
        input_path = str(input_path)
    base = [
        ffprobe_bin,
        "-v", log_level,
        "-show_streams",
        "-show_format",
        "-print_format", "json",
        "--",  # Stop option parsing in case of weird filenames
        input_path,
    ]
    if extra_args:
        # Options must come before the "--" separator
        base = base[:-2] + list(extra_args) + base[-2:]
    return base


def _stream_index(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    if isinstance(raw, float) and raw.is_integer() and raw >= 0:
        return int(raw)
    return None


def parse_streams(data: Dict[str, Any]) -> List[StreamDescriptor]:
    """
    Turn ffprobe's `streams` array into typed descriptors, in probe order.
    Safe to call in unit tests with fixture JSON.
    Raises ProbeError for entries without a usable index.
    """
    streams = (data or {}).get("streams") or []
    if not isinstance(streams, list):
        raise ProbeError("ffprobe JSON has a non-list 'streams' field")

    out: List[StreamDescriptor] = []
    for pos, s in enumerate(streams):
        if not isinstance(s, dict):
            raise ProbeError(f"ffprobe stream #{pos} is not an object")
        idx = _stream_index(s.get("index"))
        if idx is None:
            raise ProbeError(f"ffprobe stream #{pos} has invalid index {s.get('index')!r}")
        name = s.get("codec_name")
        out.append(
            StreamDescriptor(
                index=idx,
                codec_type=CodecType.parse(s.get("codec_type")),
                codec_name=str(name) if name is not None else None,
            )
        )
    return out
