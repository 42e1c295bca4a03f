# nanoffmpeg

Building blocks for driving an installed `ffmpeg` without memorising its
flags. The package finds `ffmpeg` and `ffprobe`, reads what your build
supports, inspects media files, builds argument lists from readable method
calls, runs an encode while following its progress line by line, and turns
cryptic ffmpeg errors into plain sentences.

`ffmpeg` and `ffprobe` must be installed for detection, capability queries,
probing and running to work. The package has no dependencies beyond the
standard library.

## Finding ffmpeg

```python
from nanoffmpeg.detect import detect, BinaryNotFoundError

try:
    info = detect()
except BinaryNotFoundError as exc:
    print(exc)
else:
    print(info.version, info.ffmpeg_path, info.ffprobe_path)
```

`find_binary(name)` looks on `PATH` first, then next to the running program,
then in the locations listed by `fallback_binary_paths(name)` (`/usr/bin`,
`/usr/local/bin` and the usual Homebrew directories, including `ffmpeg-full`).
It raises `BinaryNotFoundError` when nothing is found. `parse_version(path)`
runs `ffmpeg -version` and returns `(version, build_configuration)`, with the
version `"unknown"` when the output names none. `detect()` raises
`RuntimeError` when the version cannot be read.

## What your build supports

`probe_capabilities(info)` asks ffmpeg for its codecs, container formats,
filters and hardware accelerators, and caches the answer per ffmpeg version in
`~/.config/nano-ffmpeg/capabilities.json`. A query that fails leaves its part
empty.

```python
from nanoffmpeg.capabilities import probe_capabilities

caps = probe_capabilities(info)
caps.has_encoder("libx264")
caps.has_filter("loudnorm")
caps.has_hwaccel("videotoolbox")
```

The individual queries are available as `parse_codecs`, `parse_formats`,
`parse_filters` and `parse_hwaccels`, each taking the ffmpeg path.

## Inspecting a file

```python
from nanoffmpeg.probe import probe, ProbeError

try:
    result = probe(info.ffprobe_path, "holiday.mkv")
except ProbeError as exc:
    print(exc)
else:
    print(result.status_line())
    # holiday.mkv | h264 1920x1080 30fps | aac stereo 48kHz | 1m05s | 12.4 MB
```

A `ProbeResult` has `format` (a `ProbeFormat` with filename, duration in
seconds, size and bit rate) and `streams`. `video_stream()` and
`audio_stream()` return the first stream of that kind or `None`;
`subtitle_streams()` returns all subtitle streams. `duration_string()` and
`size_string()` give the values `status_line()` uses. `parse_fps("30000/1001")`
converts a frame-rate fraction, returning `0.0` for anything invalid.

## Building a command

Every builder method returns the command itself, so calls chain.

```python
from nanoffmpeg.command import Command

cmd = (
    Command("ffmpeg", "holiday.mkv", "holiday.mp4")
    .set_video_codec("libsvtav1")
    .set_preset_for_codec("libsvtav1", "slow")   # becomes "-preset 4"
    .set_crf(30)
    .set_audio_codec("aac")
)
print(cmd)          # readable, with arguments containing spaces quoted
print(cmd.build())  # ['-y', '-i', 'holiday.mkv', ..., 'holiday.mp4']
print(cmd.argv())   # the same, with the ffmpeg path first
```

`-y` is included while `overwrite` is true (the default). For `libsvtav1`,
`set_preset_for_codec` maps `slow`, `medium`, `fast` and `ultrafast` to 4, 6, 9
and 12, passes integer values through and falls back to 6 for anything else;
other codecs receive the preset unchanged.

## Running and following progress

```python
from nanoffmpeg.runner import Runner
from nanoffmpeg.progress import ProgressParser, format_duration
from nanoffmpeg.errors import translate_error

runner = Runner(cmd)
parser = ProgressParser(result.format.duration)
runner.start()
for line in runner.stderr_lines():
    update = parser.parse(line)
    if update is not None:
        print(f"{update.percent:5.1f}%  speed {update.speed}x  eta {format_duration(update.eta)}")
    elif message := translate_error(line):
        print(message)
runner.wait()
```

`stderr_lines()` splits on both newline and carriage return, as ffmpeg
rewrites its progress line in place. `wait()` raises
`subprocess.CalledProcessError` when ffmpeg exits with an error.
`cancel()` interrupts a running encode (its whole process group on POSIX
systems) and returns `False` if the process was never started or has already
exited. `cleanup_output()` removes a half-written output file.

`ProgressParser.parse` returns `None` for lines that are not progress lines;
its ETA is averaged over the last five updates. `format_size(num_bytes)`
formats byte counts such as `"1.5 MB"`.

`translate_error` returns an empty string for known harmless messages and the
line unchanged when it does not recognise it.

## Presets

`nanoffmpeg.preset` holds ready-made choices for quality, audio bitrate,
resolution, compression and GIF creation, plus output formats and their
preferred codecs: `video_presets()`, `audio_bitrate_presets()`,
`resolution_presets()`, `compress_presets()`, `gif_presets()`,
`video_formats()` and `audio_formats()`.

## Settings

`nanoffmpeg.config` keeps user settings in `~/.config/nano-ffmpeg/config.json`:
theme, hardware-acceleration choice and the ten most recently opened files.
A missing or unreadable file gives the defaults.

```python
from nanoffmpeg.config import load_config

config = load_config()
config.add_recent_file("/videos/holiday.mkv")
config.save()
```

## Start-up options

`nanoffmpeg.cli.build_parser()` returns an argument parser with `--theme/-t`,
`--dir/-d` and `--version`. `parse_theme_override` accepts `dark` or `light`
(case and surrounding spaces ignored, empty meaning no override);
`parse_startup_path` resolves a directory or a file to an absolute
`StartupTarget`. Both raise `ValueError` naming the flag when the value is
wrong.

## What this package does not do

There is no interactive terminal interface and no installed command: the
package offers the pieces such an application would use (detection, probing,
command building, running, progress, presets and settings) but no screens,
menus or key handling tying them together.