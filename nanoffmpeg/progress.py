"""Parsing of the progress lines ffmpeg writes to stderr."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field

_FRAME_RE = re.compile(r"frame=\s*(\d+)", re.ASCII)
_FPS_RE = re.compile(r"fps=\s*([\d.]+)", re.ASCII)
_QUALITY_RE = re.compile(r"q=\s*([\d.-]+)", re.ASCII)
_SIZE_RE = re.compile(r"(?:L?size|Lsize)=\s*(\d+)\s*kB", re.ASCII)
_TIME_RE = re.compile(r"time=\s*(\d+):(\d+):(\d+)\.(\d+)", re.ASCII)
_BITRATE_RE = re.compile(r"bitrate=\s*([\d.]+)\s*kbits/s", re.ASCII)
_SPEED_RE = re.compile(r"speed=\s*([\d.]+)x", re.ASCII)


@dataclass
class Progress:
    """One progress update from ffmpeg.

    ``size`` is in bytes, ``time``, ``eta`` and ``elapsed`` in seconds,
    ``bitrate`` in kbit/s, ``speed`` as a multiple of real time and
    ``percent`` from 0 to 100.
    """

    frame: int = 0
    fps: float = 0.0
    quality: float = 0.0
    size: int = 0
    time: float = 0.0
    bitrate: float = 0.0
    speed: float = 0.0
    percent: float = 0.0
    eta: float = 0.0
    elapsed: float = 0.0
    pass_number: int = 0
    total_passes: int = 0


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def _to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return 0.0


@dataclass
class ProgressParser:
    """Turns ffmpeg stderr lines into progress updates with a smoothed ETA."""

    total_duration: float
    start_time: float = field(default_factory=time.monotonic)
    max_history: int = 5
    _eta_history: list[float] = field(default_factory=list, repr=False)

    def parse(self, line: str) -> Progress | None:
        """Return the progress in a line, or None if it is not a progress line."""
        if "frame=" not in line and "size=" not in line:
            return None

        progress = Progress(elapsed=time.monotonic() - self.start_time)

        if match := _FRAME_RE.search(line):
            progress.frame = _to_int(match[1])
        if match := _FPS_RE.search(line):
            progress.fps = _to_float(match[1])
        if match := _QUALITY_RE.search(line):
            progress.quality = _to_float(match[1])
        if match := _SIZE_RE.search(line):
            progress.size = _to_int(match[1]) * 1024
        if match := _TIME_RE.search(line):
            hours, minutes, seconds, hundredths = (_to_int(g) for g in match.groups())
            progress.time = hours * 3600 + minutes * 60 + seconds + hundredths / 100
        if match := _BITRATE_RE.search(line):
            progress.bitrate = _to_float(match[1])
        if match := _SPEED_RE.search(line):
            progress.speed = _to_float(match[1])

        if self.total_duration > 0 and progress.time > 0:
            progress.percent = min(progress.time / self.total_duration * 100, 100.0)

        if progress.speed > 0 and self.total_duration > 0:
            remaining = self.total_duration - progress.time
            self._eta_history.append(remaining / progress.speed)
            if len(self._eta_history) > self.max_history:
                del self._eta_history[0]
            progress.eta = sum(self._eta_history) / len(self._eta_history)

        return progress


def _trunc_mod(value: int, divisor: int) -> int:
    """Remainder with the sign of the dividend."""
    return value - divisor * int(value / divisor)


def format_duration(seconds: float) -> str:
    """Format a number of seconds as HH:MM:SS."""
    hours = int(seconds / 3600)
    minutes = _trunc_mod(int(seconds / 60), 60)
    secs = _trunc_mod(int(seconds), 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_size(num_bytes: int) -> str:
    """Format a byte count with a binary unit, such as "1.5 MB"."""
    size = float(num_bytes)
    units = ("B", "KB", "MB", "GB")
    i = 0
    while size >= 1024 and i < len(units) - 1:
        size /= 1024
        i += 1
    if i == 0:
        return f"{size:.0f} {units[i]}"
    return f"{size:.1f} {units[i]}"