"""Command-line options of nano-ffmpeg."""

from __future__ import annotations

import argparse
import json
import os
from dataclasses import dataclass

THEME_DARK = "dark"
THEME_LIGHT = "light"
VERSION = "dev"


@dataclass(frozen=True)
class StartupTarget:
    """Where the file browser starts, and a file to open directly if one was given."""

    start_dir: str = ""
    file_path: str = ""


def _quoted(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def parse_theme_override(raw: str) -> str:
    """Normalise the --theme value; empty means no override.

    Raises ValueError for anything other than "dark" or "light".
    """
    value = raw.strip().lower()
    if not value:
        return ""
    if value not in (THEME_DARK, THEME_LIGHT):
        raise ValueError(
            f'invalid value for --theme: {_quoted(raw)} (expected "dark" or "light")'
        )
    return value


def parse_startup_path(raw: str) -> StartupTarget:
    """Resolve the --dir value to an absolute start directory and optional file.

    Raises ValueError when the path does not exist.
    """
    value = raw.strip()
    if not value:
        return StartupTarget()

    abs_path = os.path.abspath(value)
    try:
        is_dir = os.path.isdir(abs_path) if os.stat(abs_path) else False
    except OSError as err:
        raise ValueError(f"invalid value for --dir: {_quoted(raw)}: {err}") from err

    if is_dir:
        return StartupTarget(start_dir=abs_path)
    return StartupTarget(start_dir=os.path.dirname(abs_path), file_path=abs_path)


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the nano-ffmpeg command."""
    parser = argparse.ArgumentParser(
        prog="nano-ffmpeg",
        description=(
            "A beautiful TUI for ffmpeg. nano-ffmpeg exposes every ffmpeg "
            "feature through a beginner-friendly terminal UI."
        ),
    )
    parser.add_argument(
        "-t", "--theme", default="", help="Theme override for this run: dark|light"
    )
    parser.add_argument(
        "-d", "--dir", dest="dir", default="", help="Startup directory or input file path"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s version {VERSION}")
    return parser