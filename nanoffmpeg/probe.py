"""Reading media metadata with ffprobe."""

from __future__ import annotations

import json
import re
import subprocess
from dataclasses import dataclass, field
from typing import Any

_INT_RE = re.compile(r"[+-]?[0-9]+")

_SECOND_NS = 1_000_000_000
_MINUTE_NS = 60 * _SECOND_NS
_HOUR_NS = 60 * _MINUTE_NS


class ProbeError(Exception):
    """Raised when ffprobe cannot be run or its output cannot be read."""


@dataclass
class ProbeFormat:
    """Container-level metadata."""

    filename: str = ""
    format_name: str = ""
    format_long: str = ""
    duration: float = 0.0
    size: int = 0
    bit_rate: int = 0


@dataclass
class ProbeStream:
    """Per-stream metadata."""

    index: int = 0
    codec_name: str = ""
    codec_long: str = ""
    codec_type: str = ""
    width: int = 0
    height: int = 0
    pix_fmt: str = ""
    r_frame_rate: str = ""
    avg_fps: str = ""
    sample_rate: str = ""
    channels: int = 0
    channel_layout: str = ""
    bit_rate: str = ""
    duration: str = ""
    tags: dict[str, str] = field(default_factory=dict)


@dataclass
class ProbeResult:
    """Parsed ffprobe output."""

    format: ProbeFormat = field(default_factory=ProbeFormat)
    streams: list[ProbeStream] = field(default_factory=list)

    def video_stream(self) -> ProbeStream | None:
        """The first video stream, if any."""
        return next((s for s in self.streams if s.codec_type == "video"), None)

    def audio_stream(self) -> ProbeStream | None:
        """The first audio stream, if any."""
        return next((s for s in self.streams if s.codec_type == "audio"), None)

    def subtitle_streams(self) -> list[ProbeStream]:
        """All subtitle streams, in order."""
        return [s for s in self.streams if s.codec_type == "subtitle"]

    def duration_string(self) -> str:
        """Duration such as "1m05s" or "2h05m10s"."""
        ns = int(self.format.duration * _SECOND_NS)
        sign = -1 if ns < 0 else 1
        magnitude = abs(ns)
        hours = sign * (magnitude // _HOUR_NS)
        minutes = sign * ((magnitude // _MINUTE_NS) % 60)
        seconds = sign * ((magnitude // _SECOND_NS) % 60)
        if hours > 0:
            return f"{hours}h{minutes:02d}m{seconds:02d}s"
        return f"{minutes}m{seconds:02d}s"

    def size_string(self) -> str:
        """File size with a binary unit, such as "1.5 MB"."""
        size = float(self.format.size)
        units = ("B", "KB", "MB", "GB", "TB")
        i = 0
        while size >= 1024 and i < len(units) - 1:
            size /= 1024
            i += 1
        if i == 0:
            return f"{size:.0f} {units[i]}"
        return f"{size:.1f} {units[i]}"

    def status_line(self) -> str:
        """One-line summary for the status bar."""
        parts = [self.format.filename]

        video = self.video_stream()
        if video is not None:
            video_info = f"{video.codec_name} {video.width}x{video.height}"
            fps = parse_fps(video.r_frame_rate)
            if fps > 0:
                video_info += f" {fps:.3g}fps"
            parts.append(video_info)

        audio = self.audio_stream()
        if audio is not None:
            audio_info = f"{audio.codec_name} {audio.channel_layout}"
            if audio.sample_rate:
                rate = _parse_int(audio.sample_rate)
                if rate > 0:
                    audio_info += f" {rate // 1000}kHz"
            parts.append(audio_info)

        parts.append(self.duration_string())
        parts.append(self.size_string())
        return " | ".join(parts)


def probe(ffprobe_path: str, file_path: str) -> ProbeResult:
    """Run ffprobe on a file and return its parsed metadata."""
    try:
        result = subprocess.run(
            [
                ffprobe_path,
                "-v", "quiet",
                "-print_format", "json",
                "-show_format",
                "-show_streams",
                file_path,
            ],
            capture_output=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as err:
        raise ProbeError(f"ffprobe failed: {err}") from err

    try:
        raw = json.loads(result.stdout)
        return _result_from_json(raw)
    except (ValueError, TypeError, AttributeError) as err:
        raise ProbeError(f"failed to parse ffprobe output: {err}") from err


def parse_fps(rational: str) -> float:
    """Convert a rate such as "30000/1001" to frames per second; 0 if invalid."""
    parts = rational.split("/")
    if len(parts) != 2:
        return 0.0
    numerator = _parse_float(parts[0])
    denominator = _parse_float(parts[1])
    if denominator == 0:
        return 0.0
    return numerator / denominator


def _parse_float(text: str) -> float:
    if not text or "_" in text or text != text.strip():
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def _parse_int(text: str) -> int:
    return int(text) if _INT_RE.fullmatch(text) else 0


def _field(data: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) and kind is not bool or not isinstance(value, kind):
        raise ValueError(f"field {key!r} should be {kind.__name__}")
    return value


def _stream_from_json(data: Any) -> ProbeStream:
    if not isinstance(data, dict):
        raise ValueError("stream entry is not an object")
    tags = _field(data, "tags", dict, {})
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in tags.items()):
        raise ValueError("stream tags must map strings to strings")
    return ProbeStream(
        index=_field(data, "index", int, 0),
        codec_name=_field(data, "codec_name", str, ""),
        codec_long=_field(data, "codec_long_name", str, ""),
        codec_type=_field(data, "codec_type", str, ""),
        width=_field(data, "width", int, 0),
        height=_field(data, "height", int, 0),
        pix_fmt=_field(data, "pix_fmt", str, ""),
        r_frame_rate=_field(data, "r_frame_rate", str, ""),
        avg_fps=_field(data, "avg_frame_rate", str, ""),
        sample_rate=_field(data, "sample_rate", str, ""),
        channels=_field(data, "channels", int, 0),
        channel_layout=_field(data, "channel_layout", str, ""),
        bit_rate=_field(data, "bit_rate", str, ""),
        duration=_field(data, "duration", str, ""),
        tags=dict(tags),
    )


def _result_from_json(raw: Any) -> ProbeResult:
    if not isinstance(raw, dict):
        raise ValueError("ffprobe output is not a JSON object")
    fmt = _field(raw, "format", dict, {})
    streams = _field(raw, "streams", list, [])

    size = _field(fmt, "size", str, "")
    bit_rate = _field(fmt, "bit_rate", str, "")
    return ProbeResult(
        format=ProbeFormat(
            filename=_field(fmt, "filename", str, ""),
            format_name=_field(fmt, "format_name", str, ""),
            format_long=_field(fmt, "format_long_name", str, ""),
            duration=_parse_float(_field(fmt, "duration", str, "")),
            size=_parse_int(size),
            bit_rate=_parse_int(bit_rate),
        ),
        streams=[_stream_from_json(item) for item in streams],
    )