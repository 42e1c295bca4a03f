"""Named presets and output format choices for common operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class Quality(IntEnum):
    """Quality level of a preset."""

    HIGH = 0
    BALANCED = 1
    SMALL = 2
    WEB = 3


@dataclass
class Preset:
    """A named configuration for an operation."""

    name: str
    description: str
    quality: Quality = Quality.HIGH
    settings: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolutionPreset:
    """A named output resolution."""

    name: str
    width: int
    height: int


@dataclass(frozen=True)
class VideoFormat:
    """A video container option with its preferred codecs."""

    name: str
    extension: str
    codecs: tuple[str, ...]


@dataclass(frozen=True)
class AudioFormat:
    """An audio output option with its codec."""

    name: str
    extension: str
    codec: str


def video_presets() -> list[Preset]:
    """Presets for video conversion."""
    return [
        Preset("High Quality", "Best quality, larger file", Quality.HIGH, {"crf": "18", "preset": "slow"}),
        Preset("Balanced", "Good quality, reasonable size", Quality.BALANCED, {"crf": "23", "preset": "medium"}),
        Preset("Small File", "Smaller size, some quality loss", Quality.SMALL, {"crf": "28", "preset": "fast"}),
        Preset(
            "Web Optimized",
            "Fast start, streaming friendly",
            Quality.WEB,
            {"crf": "23", "preset": "medium", "movflags": "+faststart"},
        ),
    ]


def audio_bitrate_presets() -> list[Preset]:
    """Presets for audio bitrate, highest first."""
    return [
        Preset("CD Quality", "320 kbps - highest quality", settings={"bitrate": "320k"}),
        Preset("High Quality", "256 kbps - very good quality", settings={"bitrate": "256k"}),
        Preset("Standard", "192 kbps - good for most uses", settings={"bitrate": "192k"}),
        Preset("Podcast", "128 kbps - good for speech", settings={"bitrate": "128k"}),
        Preset("Lo-fi", "64 kbps - minimum acceptable", settings={"bitrate": "64k"}),
    ]


def resolution_presets() -> list[ResolutionPreset]:
    """Common output resolutions, largest first."""
    return [
        ResolutionPreset("4K (2160p)", 3840, 2160),
        ResolutionPreset("1440p", 2560, 1440),
        ResolutionPreset("1080p (Full HD)", 1920, 1080),
        ResolutionPreset("720p (HD)", 1280, 720),
        ResolutionPreset("480p (SD)", 854, 480),
        ResolutionPreset("360p", 640, 360),
    ]


def compress_presets() -> list[Preset]:
    """Compression quality presets, best quality first."""
    return [
        Preset("Visually Lossless", "CRF 18 - nearly indistinguishable from source", settings={"crf": "18"}),
        Preset("Good Quality", "CRF 23 - default, good balance", settings={"crf": "23"}),
        Preset("Noticeable", "CRF 28 - visible quality loss, much smaller", settings={"crf": "28"}),
        Preset("Heavy", "CRF 32 - significant loss, very small file", settings={"crf": "32"}),
    ]


def gif_presets() -> list[Preset]:
    """GIF creation presets."""
    return [
        Preset("High Quality", "24fps, full palette optimization", settings={"fps": "24", "width": "640"}),
        Preset("Balanced", "15fps, good for sharing", settings={"fps": "15", "width": "480"}),
        Preset("Small", "10fps, minimal size", settings={"fps": "10", "width": "320"}),
    ]


def video_formats() -> list[VideoFormat]:
    """Supported video output formats."""
    return [
        VideoFormat("MP4", "mp4", ("libx264", "libx265", "libsvtav1")),
        VideoFormat("MKV", "mkv", ("libx264", "libx265", "libsvtav1", "libvpx-vp9")),
        VideoFormat("WebM", "webm", ("libvpx-vp9", "libsvtav1")),
        VideoFormat("AVI", "avi", ("libx264", "mpeg4")),
        VideoFormat("MOV", "mov", ("libx264", "libx265")),
        VideoFormat("FLV", "flv", ("libx264",)),
    ]


def audio_formats() -> list[AudioFormat]:
    """Supported audio output formats."""
    return [
        AudioFormat("MP3", "mp3", "libmp3lame"),
        AudioFormat("AAC", "m4a", "aac"),
        AudioFormat("FLAC", "flac", "flac"),
        AudioFormat("WAV", "wav", "pcm_s16le"),
        AudioFormat("OGG Vorbis", "ogg", "libvorbis"),
        AudioFormat("Opus", "opus", "libopus"),
    ]