"""Builder for ffmpeg command lines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# libsvtav1 accepts only integer presets (0 = slowest/best, 13 = fastest),
# so the named presets are mapped onto that scale.
_SVT_AV1_PRESETS = {
    "slow": "4",
    "medium": "6",
    "fast": "9",
    "ultrafast": "12",
}

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_QUOTE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _quote(text: str) -> str:
    """Double-quote a string, escaping backslashes, quotes and control characters."""
    out = []
    for ch in text:
        if ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif not ch.isprintable() and ch != " ":
            code = ord(ch)
            if code < 0x100:
                out.append(f"\\x{code:02x}")
            elif code < 0x10000:
                out.append(f"\\u{code:04x}")
            else:
                out.append(f"\\U{code:08x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


@dataclass
class Command:
    """An ffmpeg invocation assembled from structured options.

    Every setter appends to the argument list and returns the command itself,
    so calls can be chained.
    """

    ffmpeg_path: str
    input: str
    output: str
    args: list[str] = field(default_factory=list)
    overwrite: bool = True

    def add_arg(self, arg: str) -> Command:
        """Append a single argument."""
        self.args.append(arg)
        return self

    def add_args(self, flag: str, value: str) -> Command:
        """Append a flag and its value."""
        self.args.extend((flag, value))
        return self

    def set_video_codec(self, codec: str) -> Command:
        return self.add_args("-c:v", codec)

    def set_audio_codec(self, codec: str) -> Command:
        return self.add_args("-c:a", codec)

    def set_crf(self, crf: int) -> Command:
        """Set the constant rate factor."""
        return self.add_args("-crf", str(int(crf)))

    def set_preset(self, preset: str) -> Command:
        """Set the encoding preset (ultrafast to veryslow)."""
        return self.add_args("-preset", preset)

    def set_preset_for_codec(self, codec: str, preset: str) -> Command:
        """Set the preset in the form the given codec accepts.

        For libsvtav1, named presets map to its integer scale, integer values
        pass through, and anything else falls back to the "medium" value.
        Other codecs get the preset unchanged.
        """
        if codec != "libsvtav1":
            return self.add_args("-preset", preset)
        key = preset.strip().lower()
        if key in _SVT_AV1_PRESETS:
            return self.add_args("-preset", _SVT_AV1_PRESETS[key])
        if _INTEGER_RE.fullmatch(key):
            return self.add_args("-preset", key)
        return self.add_args("-preset", _SVT_AV1_PRESETS["medium"])

    def set_bitrate(self, bitrate: str) -> Command:
        return self.add_args("-b:v", bitrate)

    def set_audio_bitrate(self, bitrate: str) -> Command:
        return self.add_args("-b:a", bitrate)

    def set_resolution(self, width: int, height: int) -> Command:
        return self.add_args("-vf", f"scale={int(width)}:{int(height)}")

    def set_scale_height(self, height: int) -> Command:
        """Scale to a height, keeping the aspect ratio with an even width."""
        return self.add_args("-vf", f"scale=-2:{int(height)}")

    def set_start_time(self, t: str) -> Command:
        return self.add_args("-ss", t)

    def set_end_time(self, t: str) -> Command:
        return self.add_args("-to", t)

    def set_duration(self, d: str) -> Command:
        return self.add_args("-t", d)

    def stream_copy(self) -> Command:
        """Copy all streams without re-encoding."""
        return self.add_args("-c", "copy")

    def no_video(self) -> Command:
        return self.add_arg("-vn")

    def no_audio(self) -> Command:
        return self.add_arg("-an")

    def add_video_filter(self, video_filter: str) -> Command:
        return self.add_args("-vf", video_filter)

    def add_audio_filter(self, audio_filter: str) -> Command:
        return self.add_args("-af", audio_filter)

    def set_frame_rate(self, fps: int) -> Command:
        return self.add_args("-r", str(int(fps)))

    def set_pixel_format(self, pix_fmt: str) -> Command:
        return self.add_args("-pix_fmt", pix_fmt)

    def set_hw_accel(self, accel: str) -> Command:
        return self.add_args("-hwaccel", accel)

    def set_video_encoder(self, encoder: str) -> Command:
        return self.add_args("-c:v", encoder)

    def build(self) -> list[str]:
        """Return the arguments passed to ffmpeg, without the program path."""
        args = ["-y"] if self.overwrite else []
        args += ["-i", self.input, *self.args, self.output]
        return args

    def argv(self) -> list[str]:
        """Return the full argument vector, program path first, ready to run."""
        return [self.ffmpeg_path, *self.build()]

    def __str__(self) -> str:
        return " ".join(_quote(part) if " " in part else part for part in self.argv())