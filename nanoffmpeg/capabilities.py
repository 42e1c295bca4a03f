"""Discovery and caching of what the installed ffmpeg supports."""

from __future__ import annotations

import json
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .detect import Info

_CODEC_RE = re.compile(r"^\s*([D.])([E.])([VASDT])([I.])([L.])([S.])\s+(\S+)\s+")
_FORMAT_RE = re.compile(r"^\s*([D ])([E ])[\s.]+(\S+)\s+")
_FILTER_RE = re.compile(r"^\s*[T.][S.][C.]\s+(\S+)\s+")

_CODEC_TYPES = {"V": "video", "A": "audio", "S": "subtitle", "D": "data"}


@dataclass
class Codec:
    """A codec known to ffmpeg."""

    name: str
    decoding: bool = False
    encoding: bool = False
    codec_type: str = ""
    lossy: bool = False
    lossless: bool = False


@dataclass
class Format:
    """A container format known to ffmpeg."""

    name: str
    demux: bool = False
    mux: bool = False


@dataclass
class Capabilities:
    """Codecs, formats, filters and hardware accelerators of an ffmpeg build."""

    codecs: list[Codec] = field(default_factory=list)
    formats: list[Format] = field(default_factory=list)
    filters: list[str] = field(default_factory=list)
    hwaccels: list[str] = field(default_factory=list)
    version: str = ""

    def has_encoder(self, name: str) -> bool:
        """Whether a codec of this name can encode."""
        return any(codec.name == name and codec.encoding for codec in self.codecs)

    def has_filter(self, name: str) -> bool:
        return name in self.filters

    def has_hwaccel(self, name: str) -> bool:
        return name in self.hwaccels


def probe_capabilities(info: Info) -> Capabilities:
    """Return the capabilities of the ffmpeg in ``info``.

    A cached result for the same version is used when present; otherwise
    ffmpeg is queried, and the result is cached. Queries that fail leave
    their part empty.
    """
    try:
        cached = load_cached_capabilities(info.version)
    except (OSError, ValueError):
        cached = None
    if cached is not None:
        return cached

    caps = Capabilities(version=info.version)
    queries = (
        ("codecs", parse_codecs),
        ("formats", parse_formats),
        ("filters", parse_filters),
        ("hwaccels", parse_hwaccels),
    )
    for attribute, query in queries:
        try:
            setattr(caps, attribute, query(info.ffmpeg_path))
        except (OSError, subprocess.CalledProcessError):
            pass

    try:
        cache_capabilities(caps)
    except OSError:
        pass
    return caps


def _run_lines(ffmpeg_path: str, flag: str) -> list[str]:
    result = subprocess.run(
        [ffmpeg_path, flag, "-hide_banner"],
        capture_output=True,
        check=True,
    )
    return result.stdout.decode("utf-8", errors="replace").split("\n")


def parse_codecs(ffmpeg_path: str) -> list[Codec]:
    """Query ``ffmpeg -codecs`` and parse its listing."""
    codecs = []
    for line in _run_lines(ffmpeg_path, "-codecs"):
        match = _CODEC_RE.match(line)
        if match is None:
            continue
        codecs.append(
            Codec(
                name=match.group(7),
                decoding=match.group(1) == "D",
                encoding=match.group(2) == "E",
                codec_type=_CODEC_TYPES.get(match.group(3), "unknown"),
                lossy=match.group(5) == "L",
                lossless=match.group(6) == "S",
            )
        )
    return codecs


def parse_formats(ffmpeg_path: str) -> list[Format]:
    """Query ``ffmpeg -formats`` and parse the listing after its header."""
    formats = []
    in_list = False
    for line in _run_lines(ffmpeg_path, "-formats"):
        if "---" in line:
            in_list = True
            continue
        if not in_list:
            continue
        match = _FORMAT_RE.match(line)
        if match is None:
            continue
        formats.append(
            Format(
                name=match.group(3),
                demux=match.group(1) == "D",
                mux=match.group(2) == "E",
            )
        )
    return formats


def parse_filters(ffmpeg_path: str) -> list[str]:
    """Query ``ffmpeg -filters`` and return the filter names."""
    filters = []
    in_list = False
    for line in _run_lines(ffmpeg_path, "-filters"):
        if "------" in line:
            in_list = True
            continue
        if not in_list:
            continue
        match = _FILTER_RE.match(line)
        if match is not None:
            filters.append(match.group(1))
    return filters


def parse_hwaccels(ffmpeg_path: str) -> list[str]:
    """Query ``ffmpeg -hwaccels`` and return the method names."""
    accels = []
    in_list = False
    for raw in _run_lines(ffmpeg_path, "-hwaccels"):
        line = raw.strip()
        if line == "Hardware acceleration methods:":
            in_list = True
            continue
        if in_list and line:
            accels.append(line)
    return accels


def config_dir() -> Path:
    """Directory holding the application's configuration and cache."""
    return Path.home() / ".config" / "nano-ffmpeg"


def cache_path() -> Path:
    """Location of the cached capabilities file."""
    return config_dir() / "capabilities.json"


def load_cached_capabilities(current_version: str) -> Capabilities | None:
    """Load cached capabilities.

    Returns None when the cache belongs to another ffmpeg version. Raises
    OSError when the cache cannot be read and ValueError when it is malformed.
    """
    data = json.loads(cache_path().read_text(encoding="utf-8"))
    caps = _caps_from_dict(data)
    if caps.version != current_version:
        return None
    return caps


def cache_capabilities(caps: Capabilities) -> None:
    """Write capabilities to the cache file."""
    directory = config_dir()
    directory.mkdir(parents=True, exist_ok=True)
    cache_path().write_text(json.dumps(_caps_to_dict(caps), indent=2), encoding="utf-8")


def _caps_to_dict(caps: Capabilities) -> dict[str, Any]:
    return {
        "codecs": [
            {
                "name": c.name,
                "decoding": c.decoding,
                "encoding": c.encoding,
                "type": c.codec_type,
                "lossy": c.lossy,
                "lossless": c.lossless,
            }
            for c in caps.codecs
        ],
        "formats": [{"name": f.name, "demux": f.demux, "mux": f.mux} for f in caps.formats],
        "filters": list(caps.filters),
        "hwaccels": list(caps.hwaccels),
        "version": caps.version,
    }


def _caps_from_dict(data: Any) -> Capabilities:
    if not isinstance(data, dict):
        raise ValueError("capabilities cache is not a JSON object")
    try:
        codecs = [
            Codec(
                name=str(item.get("name", "")),
                decoding=bool(item.get("decoding", False)),
                encoding=bool(item.get("encoding", False)),
                codec_type=str(item.get("type", "")),
                lossy=bool(item.get("lossy", False)),
                lossless=bool(item.get("lossless", False)),
            )
            for item in data.get("codecs") or []
        ]
        formats = [
            Format(
                name=str(item.get("name", "")),
                demux=bool(item.get("demux", False)),
                mux=bool(item.get("mux", False)),
            )
            for item in data.get("formats") or []
        ]
        filters = [str(name) for name in data.get("filters") or []]
        hwaccels = [str(name) for name in data.get("hwaccels") or []]
        version = str(data.get("version") or "")
    except (AttributeError, TypeError) as err:
        raise ValueError(f"malformed capabilities cache: {err}") from err
    return Capabilities(
        codecs=codecs,
        formats=formats,
        filters=filters,
        hwaccels=hwaccels,
        version=version,
    )