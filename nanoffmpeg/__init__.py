"""Finding, querying, probing and driving ffmpeg, with presets and user settings."""

__version__ = "0.1.0"