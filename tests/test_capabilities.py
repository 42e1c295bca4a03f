import json
from pathlib import Path

import pytest

from nanoffmpeg.capabilities import (
    Capabilities,
    Codec,
    Format,
    cache_capabilities,
    cache_path,
    config_dir,
    load_cached_capabilities,
    parse_codecs,
    parse_filters,
    parse_formats,
    parse_hwaccels,
    probe_capabilities,
)
from nanoffmpeg.detect import Info


def _fake_binary(directory: Path, stdout: str) -> str:
    path = directory / "fake"
    path.write_text("#!/bin/sh\ncat <<'__END__'\n" + stdout + "\n__END__\n")
    path.chmod(0o755)
    return str(path)


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


def test_has_encoder():
    caps = Capabilities(
        codecs=[
            Codec("libx264", encoding=True, codec_type="video"),
            Codec("h264", decoding=True, encoding=False, codec_type="video"),
            Codec("aac", encoding=True, codec_type="audio"),
        ]
    )
    assert caps.has_encoder("libx264")
    assert not caps.has_encoder("h264")
    assert caps.has_encoder("aac")
    assert not caps.has_encoder("libx265")


def test_has_filter():
    caps = Capabilities(filters=["scale", "crop", "vidstabdetect", "loudnorm"])
    assert caps.has_filter("scale")
    assert caps.has_filter("vidstabdetect")
    assert not caps.has_filter("nonexistent")


def test_has_hwaccel():
    caps = Capabilities(hwaccels=["videotoolbox", "cuda"])
    assert caps.has_hwaccel("videotoolbox")
    assert not caps.has_hwaccel("vaapi")


def test_parse_codecs_from_fake_ffmpeg(tmp_path):
    output = (
        " D.V.L. h264                 H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10\n"
        " DEV.L. libx264              libx264 H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10"
        " (encoders: libx264 libx264rgb )\n"
        " DEA.L. aac                  AAC (Advanced Audio Coding)\n"
        " DES..S mov_text             MOV text"
    )
    codecs = {c.name: c for c in parse_codecs(_fake_binary(tmp_path, output))}

    h264 = codecs["h264"]
    assert h264.decoding and not h264.encoding
    assert h264.codec_type == "video"
    assert h264.lossy

    libx264 = codecs["libx264"]
    assert libx264.encoding and libx264.decoding

    assert codecs["aac"].codec_type == "audio"

    mov_text = codecs["mov_text"]
    assert mov_text.codec_type == "subtitle"
    assert mov_text.lossless and not mov_text.lossy


def test_parse_formats_skips_header(tmp_path):
    output = (
        "File formats:\n"
        " D. = Demuxing supported\n"
        " .E = Muxing supported\n"
        " ---\n"
        " DE mov              QuickTime / MOV\n"
        " D  mpeg             MPEG-1 Systems\n"
        "  E md5              MD5 testing"
    )
    formats = parse_formats(_fake_binary(tmp_path, output))
    assert formats == [
        Format("mov", demux=True, mux=True),
        Format("mpeg", demux=True, mux=False),
        Format("md5", demux=False, mux=True),
    ]


def test_parse_filters_strips_header(tmp_path):
    output = (
        "Filters:\n"
        " T.. = Timeline support\n"
        " .S. = Slice threading\n"
        " ..C = Command support\n"
        " A = Audio input/output\n"
        " V = Video input/output\n"
        " N = Dynamic number and/or type of input/output\n"
        " | = Source or sink filter\n"
        "------\n"
        " T.. scale            V->V       Scale the input video size.\n"
        " ... vidstabdetect    V->V       Analyze for stabilization.\n"
        " ... loudnorm         A->A       EBU R128 loudness normalization."
    )
    filters = parse_filters(_fake_binary(tmp_path, output))
    assert filters == ["scale", "vidstabdetect", "loudnorm"]


def test_parse_hwaccels_ignores_blank_lines(tmp_path):
    output = "Hardware acceleration methods:\nvideotoolbox\ncuda\n\n"
    assert parse_hwaccels(_fake_binary(tmp_path, output)) == ["videotoolbox", "cuda"]


def test_cache_round_trip(home):
    original = Capabilities(
        version="6.1",
        codecs=[Codec("libx264", encoding=True, codec_type="video")],
        formats=[Format("mp4", demux=True, mux=True)],
        filters=["scale"],
        hwaccels=["videotoolbox"],
    )
    cache_capabilities(original)
    loaded = load_cached_capabilities("6.1")
    assert loaded == original


def test_cache_file_uses_json_keys(home):
    cache_capabilities(Capabilities(version="6.1", codecs=[Codec("aac", codec_type="audio")]))
    data = json.loads(cache_path().read_text())
    assert data["version"] == "6.1"
    assert data["codecs"][0]["type"] == "audio"


def test_load_cached_stale_version(home):
    cache_capabilities(Capabilities(version="6.1"))
    assert load_cached_capabilities("6.2") is None


def test_load_cached_missing_file(home):
    with pytest.raises(FileNotFoundError):
        load_cached_capabilities("6.1")


def test_load_cached_malformed(home):
    config_dir().mkdir(parents=True)
    cache_path().write_text("not json")
    with pytest.raises(ValueError):
        load_cached_capabilities("6.1")


def test_config_and_cache_path_use_home(home):
    assert str(config_dir()).startswith(str(home))
    assert cache_path().name == "capabilities.json"


def test_probe_capabilities_queries_and_caches(home, tmp_path):
    script = tmp_path / "ffmpeg"
    script.write_text(
        "#!/bin/sh\n"
        'case "$1" in\n'
        "  -codecs) echo ' DEV.L. libx264   H.264 encoder' ;;\n"
        "  -hwaccels) printf 'Hardware acceleration methods:\\ncuda\\n' ;;\n"
        "  *) exit 1 ;;\n"
        "esac\n"
    )
    script.chmod(0o755)

    caps = probe_capabilities(Info(ffmpeg_path=str(script), version="7.0"))
    assert caps.version == "7.0"
    assert caps.has_encoder("libx264")
    assert caps.hwaccels == ["cuda"]
    assert caps.formats == []
    assert caps.filters == []
    assert cache_path().exists()

    script.unlink()
    again = probe_capabilities(Info(ffmpeg_path=str(script), version="7.0"))
    assert again == caps


def test_probe_capabilities_uses_existing_cache(home):
    cached = Capabilities(version="5.0", filters=["crop"])
    cache_capabilities(cached)
    caps = probe_capabilities(Info(ffmpeg_path="/definitely/not/ffmpeg", version="5.0"))
    assert caps.filters == ["crop"]