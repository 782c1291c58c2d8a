"""Pytest configuration and fixtures for media_automation tests."""

import json
import subprocess
from pathlib import Path

import pytest
from PIL import Image

from media_automation import config as config_module
from media_automation.config import Config, InferenceConfig, VideoConfig, set_config

MUSIC_URL = "https://inference.test/models/music"
TTS_URL = "https://inference.test/models/tts"


@pytest.fixture
def config(tmp_path):
    """Config pointing every path at a temporary directory."""
    previous = config_module._config
    cfg = Config(
        credential="hf_test_token",
        image_path=tmp_path / "image_source.jpg",
        video_path=tmp_path / "video_source.mp4",
        music_output=tmp_path / "generated_music.mp3",
        voiceover_output=tmp_path / "generated_voiceover.wav",
        output_path=tmp_path / "final_output.mp4",
        ffmpeg_binary="ffmpeg",
        ffprobe_binary="ffprobe",
        inference=InferenceConfig(music_endpoint=MUSIC_URL, tts_endpoint=TTS_URL),
        video=VideoConfig(),
    )
    set_config(cfg)
    yield cfg
    set_config(previous)


@pytest.fixture
def image_file(config):
    """A real JPEG at the configured image path, with odd dimensions."""
    Image.new("RGB", (641, 359), color=(30, 60, 90)).save(config.image_path, "JPEG")
    return config.image_path


class FakeMediaTool:
    """
    Stand-in for subprocess.run that understands the FFmpeg/FFprobe calls we make.

    FFmpeg calls write their output file and remember which streams it holds
    (from the -map arguments). FFprobe calls report those streams, or guess
    from the file suffix for inputs the fake did not produce.
    """

    def __init__(self):
        self.calls = []
        self.fail_ffmpeg = False
        self.produced = {}

    @property
    def ffmpeg_calls(self):
        return [c for c in self.calls if Path(c[0]).name == "ffmpeg"]

    @property
    def ffprobe_calls(self):
        return [c for c in self.calls if Path(c[0]).name == "ffprobe"]

    def streams_for(self, path):
        if path in self.produced:
            return self.produced[path]
        suffix = Path(path).suffix
        if suffix == ".mp3":
            return [{"index": 0, "codec_type": "audio", "codec_name": "mp3", "duration": "12.0"}]
        if suffix == ".wav":
            return [{"index": 0, "codec_type": "audio", "codec_name": "pcm_s16le", "duration": "3.5"}]
        return [{"index": 0, "codec_type": "video", "codec_name": "h264", "duration": "10.0"}]

    def __call__(self, cmd, *args, **kwargs):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        tool = Path(cmd[0]).name

        if "-version" in cmd:
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        if tool == "ffprobe":
            payload = json.dumps({"streams": self.streams_for(cmd[-1])})
            return subprocess.CompletedProcess(cmd, 0, stdout=payload, stderr="")

        if self.fail_ffmpeg:
            raise subprocess.CalledProcessError(1, cmd, output="", stderr="Invalid data found when processing input")

        output = cmd[-1]
        maps = [cmd[i + 1] for i, arg in enumerate(cmd) if arg == "-map"]
        if maps:
            streams = []
            for index, target in enumerate(maps):
                kind = "video" if ":v:" in target else "audio"
                codec = "h264" if kind == "video" else "aac"
                streams.append({"index": index, "codec_type": kind, "codec_name": codec})
        else:
            streams = [{"index": 0, "codec_type": "video", "codec_name": "h264"}]
        self.produced[output] = streams
        Path(output).write_bytes(b"\x00\x00\x00\x18ftypmp42")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


@pytest.fixture
def fake_media_tool(monkeypatch):
    """Replace subprocess.run with a FakeMediaTool for the duration of a test."""
    fake = FakeMediaTool()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake
