"""Locating the ffmpeg and ffprobe executables and reading their version."""

from __future__ import annotations

import re
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

_VERSION_RE = re.compile(r"ffmpeg version (\S+)")


class BinaryNotFoundError(Exception):
    """Raised when a required executable cannot be located."""


@dataclass
class Info:
    """Details of a detected ffmpeg installation."""

    ffmpeg_path: str = ""
    ffprobe_path: str = ""
    version: str = ""
    build_config: str = ""


def detect() -> Info:
    """Find ffmpeg and ffprobe and return the installation details.

    Raises BinaryNotFoundError when either executable is missing and
    RuntimeError when the version cannot be read.
    """
    try:
        ffmpeg_path = find_binary("ffmpeg")
    except BinaryNotFoundError as err:
        raise BinaryNotFoundError(f"ffmpeg binary not found: {err}") from err
    try:
        ffprobe_path = find_binary("ffprobe")
    except BinaryNotFoundError as err:
        raise BinaryNotFoundError(f"ffprobe binary not found: {err}") from err
    try:
        version, build_config = parse_version(ffmpeg_path)
    except (OSError, subprocess.CalledProcessError) as err:
        raise RuntimeError(f"failed to parse ffmpeg version: {err}") from err
    return Info(
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        version=version,
        build_config=build_config,
    )


def find_binary(name: str) -> str:
    """Return the path of an executable.

    The search order is PATH, then the directory of the running program,
    then common install locations.
    """
    found = shutil.which(name)
    if found:
        return found

    beside = _find_next_to_executable(name)
    if beside is not None:
        return beside

    for candidate in fallback_binary_paths(name):
        if shutil.which(candidate):
            return candidate

    raise BinaryNotFoundError(f"{name} not found in PATH or common locations")


def fallback_binary_paths(name: str) -> list[str]:
    """Common and keg-only Homebrew locations to try for an executable."""
    return [
        "/usr/bin/" + name,
        "/usr/local/bin/" + name,
        "/opt/homebrew/bin/" + name,
        "/usr/local/opt/ffmpeg/bin/" + name,
        "/opt/homebrew/opt/ffmpeg/bin/" + name,
        "/usr/local/opt/ffmpeg-full/bin/" + name,
        "/opt/homebrew/opt/ffmpeg-full/bin/" + name,
    ]


def parse_version(ffmpeg_path: str) -> tuple[str, str]:
    """Run ``ffmpeg -version`` and return (version, build configuration).

    The version is "unknown" when the output does not name one.
    """
    result = subprocess.run(
        [ffmpeg_path, "-version"],
        capture_output=True,
        check=True,
    )
    output = result.stdout.decode("utf-8", errors="replace")

    match = _VERSION_RE.search(output)
    version = match.group(1) if match else "unknown"

    build_config = ""
    for line in output.split("\n"):
        stripped = line.strip()
        if stripped.startswith("configuration:"):
            build_config = stripped.removeprefix("configuration: ")
            break

    return version, build_config


def _find_next_to_executable(name: str) -> str | None:
    program = sys.argv[0] if sys.argv else ""
    if not program:
        return None
    try:
        exe_dir = Path(program).resolve().parent
    except OSError:
        return None
    candidate = exe_dir / name
    if sys.platform == "win32":
        candidate = candidate.with_name(candidate.name + ".exe")
    try:
        if candidate.is_file():
            return str(candidate)
    except OSError:
        return None
    return None