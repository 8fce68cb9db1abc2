from __future__ import annotations

from datetime import timedelta


def format_duration_sexagesimal(d: timedelta) -> str:
    """
    Render a duration as H:MM:SS[.fraction] for ffmpeg's -ss / -t.
    Trailing fractional zeros (and a bare dot) are dropped:
    timedelta(0) -> "0:00:00", timedelta(seconds=3723.5) -> "1:02:03.5".
    """
    if d < timedelta(0):
        raise ValueError(f"cannot format negative duration {d!r}")
    total_us = (d.days * 86400 + d.seconds) * 1_000_000 + d.microseconds
    secs, us = divmod(total_us, 1_000_000)
    mins, s = divmod(secs, 60)
    h, m = divmod(mins, 60)
    out = f"{h}:{m:02d}:{s:02d}.{us:06d}"
    return out.rstrip("0").rstrip(".")
