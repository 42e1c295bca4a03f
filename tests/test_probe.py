from pathlib import Path

import pytest

from nanoffmpeg.probe import (
    ProbeError,
    ProbeFormat,
    ProbeResult,
    ProbeStream,
    parse_fps,
    probe,
)


def _write_script(directory: Path, body: str) -> str:
    path = directory / "fake-ffprobe"
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(0o755)
    return str(path)


def test_video_and_audio_streams():
    result = ProbeResult(
        streams=[
            ProbeStream(codec_type="subtitle", codec_name="subrip"),
            ProbeStream(codec_type="video", codec_name="h264", width=1920, height=1080, r_frame_rate="30/1"),
            ProbeStream(codec_type="audio", codec_name="aac", channel_layout="stereo", sample_rate="48000"),
            ProbeStream(codec_type="subtitle", codec_name="ass"),
        ]
    )
    assert result.video_stream().codec_name == "h264"
    assert result.audio_stream().codec_name == "aac"
    assert [s.codec_name for s in result.subtitle_streams()] == ["subrip", "ass"]


def test_no_matching_streams():
    result = ProbeResult(streams=[ProbeStream(codec_type="data")])
    assert result.video_stream() is None
    assert result.audio_stream() is None
    assert result.subtitle_streams() == []


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0m00s"), (45, "0m45s"), (90, "1m30s"), (7510, "2h05m10s")],
)
def test_duration_string(seconds, expected):
    assert ProbeResult(format=ProbeFormat(duration=seconds)).duration_string() == expected


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0 B"),
        (512, "512 B"),
        (1024, "1.0 KB"),
        (1024 * 1024, "1.0 MB"),
        (1024 * 1024 * 1024, "1.0 GB"),
        (1024 * 1024 * 3 // 2, "1.5 MB"),
    ],
)
def test_size_string(size, expected):
    assert ProbeResult(format=ProbeFormat(size=size)).size_string() == expected


def test_status_line_video_and_audio():
    result = ProbeResult(
        format=ProbeFormat(filename="/tmp/demo.mp4", duration=65, size=2048),
        streams=[
            ProbeStream(codec_type="video", codec_name="h264", width=1920, height=1080, r_frame_rate="30/1"),
            ProbeStream(codec_type="audio", codec_name="aac", channel_layout="stereo", sample_rate="48000"),
        ],
    )
    line = result.status_line()
    for want in ("/tmp/demo.mp4", "h264 1920x1080", "30fps", "aac stereo", "48kHz", "1m05s", "2.0 KB", " | "):
        assert want in line
    assert line == "/tmp/demo.mp4 | h264 1920x1080 30fps | aac stereo 48kHz | 1m05s | 2.0 KB"


def test_status_line_video_only():
    result = ProbeResult(
        format=ProbeFormat(filename="clip.mkv", duration=30, size=1024),
        streams=[ProbeStream(codec_type="video", codec_name="h265", width=1280, height=720)],
    )
    line = result.status_line()
    assert "h265 1280x720" in line
    assert "fps" not in line
    assert "kHz" not in line


def test_status_line_audio_only():
    result = ProbeResult(
        format=ProbeFormat(filename="song.mp3", duration=180, size=512 * 1024),
        streams=[ProbeStream(codec_type="audio", codec_name="mp3", channel_layout="stereo")],
    )
    line = result.status_line()
    assert "mp3 stereo" in line
    assert "kHz" not in line


@pytest.mark.parametrize(
    "rational, expected",
    [
        ("30/1", 30.0),
        ("30000/1001", 30000.0 / 1001.0),
        ("0/0", 0.0),
        ("abc", 0.0),
        ("", 0.0),
        ("60", 0.0),
    ],
)
def test_parse_fps(rational, expected):
    assert parse_fps(rational) == pytest.approx(expected, abs=0.001)


def test_probe_invalid_json(tmp_path):
    script = _write_script(tmp_path, "echo 'not json output'\n")
    with pytest.raises(ProbeError) as excinfo:
        probe(script, "/tmp/whatever.mp4")
    assert "failed to parse ffprobe output" in str(excinfo.value)


def test_probe_exec_failure():
    with pytest.raises(ProbeError) as excinfo:
        probe("/definitely/not/a/real/path/ffprobe", "/tmp/x.mp4")
    assert "ffprobe failed" in str(excinfo.value)


def test_probe_parses_json(tmp_path):
    payload = (
        '{"format": {"filename": "a.mp4", "format_name": "mov", "format_long_name": "QuickTime",'
        ' "duration": "12.5", "size": "2048", "bit_rate": "1000"},'
        ' "streams": [{"index": 0, "codec_type": "video", "codec_name": "h264",'
        ' "width": 640, "height": 360, "r_frame_rate": "25/1", "tags": {"language": "und"}},'
        ' {"index": 1, "codec_type": "audio", "codec_name": "aac", "channels": 2,'
        ' "sample_rate": "44100", "channel_layout": "stereo"}]}'
    )
    script = _write_script(tmp_path, "cat <<'__END__'\n" + payload + "\n__END__\n")
    result = probe(script, "a.mp4")

    assert result.format == ProbeFormat(
        filename="a.mp4",
        format_name="mov",
        format_long="QuickTime",
        duration=12.5,
        size=2048,
        bit_rate=1000,
    )
    video = result.video_stream()
    assert (video.width, video.height, video.r_frame_rate) == (640, 360, "25/1")
    assert video.tags == {"language": "und"}
    assert result.audio_stream().channels == 2
    assert result.status_line() == "a.mp4 | h264 640x360 25fps | aac stereo 44kHz | 0m12s | 2.0 KB"


def test_probe_unparseable_numbers_become_zero(tmp_path):
    payload = '{"format": {"filename": "b.mkv", "duration": "N/A", "size": ""}, "streams": []}'
    script = _write_script(tmp_path, "cat <<'__END__'\n" + payload + "\n__END__\n")
    result = probe(script, "b.mkv")
    assert result.format.duration == 0.0
    assert result.format.size == 0
    assert result.streams == []


def test_probe_wrong_field_type_is_parse_error(tmp_path):
    payload = '{"format": {}, "streams": [{"width": "wide"}]}'
    script = _write_script(tmp_path, "cat <<'__END__'\n" + payload + "\n__END__\n")
    with pytest.raises(ProbeError) as excinfo:
        probe(script, "c.mp4")
    assert "failed to parse ffprobe output" in str(excinfo.value)