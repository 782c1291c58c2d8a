"""
Video Assembly Module for MediaAutomation.
Uses FFmpeg to turn a still image into a video and to mux generated audio onto it.
"""

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image

from .config import get_config


logger = logging.getLogger(__name__)


RESOLUTION_MAP = {
    "480p": (854, 480),
    "720p": (1280, 720),
    "1080p": (1920, 1080)
}


@dataclass
class StreamInfo:
    """A single stream reported by FFprobe."""
    index: int
    codec_type: str       # "video", "audio", "subtitle", ...
    codec_name: str
    duration: Optional[float] = None


def _run_media_tool(cmd: list[str]) -> subprocess.CompletedProcess:
    """Run an FFmpeg/FFprobe command, logging stderr before re-raising a failure."""
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        return subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        logger.error(f"{cmd[0]} exited with status {e.returncode}:\n{e.stderr}")
        raise
    except FileNotFoundError:
        logger.error(f"Media tool not found: {cmd[0]}")
        raise


def _require_file(path: Path, label: str) -> Path:
    path = Path(path)
    if not path.exists():
        logger.error(f"{label} not found: {path}")
        raise FileNotFoundError(f"{label} not found: {path}")
    return path


def check_ffmpeg_installation() -> dict:
    """
    Check whether FFmpeg and FFprobe can be executed.
    
    Returns:
        Dictionary with installation status
    """
    config = get_config()
    status = {}
    
    for key, binary in (("ffmpeg", config.ffmpeg_binary), ("ffprobe", config.ffprobe_binary)):
        try:
            subprocess.run([binary, "-version"], capture_output=True, check=True)
            status[key] = True
        except (subprocess.CalledProcessError, FileNotFoundError):
            status[key] = False
    
    return status


def probe_streams(media_path: Path) -> list[StreamInfo]:
    """
    Get stream metadata using FFprobe.
    
    Args:
        media_path: Path to an audio or video file
    
    Returns:
        List of StreamInfo, in container order
    """
    media_path = _require_file(media_path, "Media file")
    config = get_config()
    
    cmd = [
        config.ffprobe_binary,
        "-v", "error",
        "-show_entries", "stream=index,codec_type,codec_name,duration",
        "-of", "json",
        str(media_path)
    ]
    
    result = _run_media_tool(cmd)
    data = json.loads(result.stdout or "{}")
    
    streams = []
    for stream in data.get("streams", []):
        duration = stream.get("duration")
        streams.append(StreamInfo(
            index=int(stream.get("index", len(streams))),
            codec_type=stream.get("codec_type", "unknown"),
            codec_name=stream.get("codec_name", "unknown"),
            duration=float(duration) if duration not in (None, "N/A") else None
        ))
    
    return streams


def prepare_still_image(
    image_path: Path,
    output_path: Path,
    resolution: str = "720p"
) -> Path:
    """
    Resize a still image to the output resolution.
    
    H.264 with yuv420p needs even dimensions, so arbitrary photos are
    scaled to one of the fixed output sizes first.
    
    Args:
        image_path: Path to the source image
        output_path: Path to save the resized image
        resolution: Target resolution ("480p", "720p", "1080p")
    
    Returns:
        Path to the resized image
    """
    image_path = _require_file(image_path, "Image source")
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    
    size = RESOLUTION_MAP.get(resolution, RESOLUTION_MAP["720p"])
    
    with Image.open(image_path) as img:
        img = img.convert("RGB")
        if img.size != size:
            img = img.resize(size, Image.Resampling.LANCZOS)
        img.save(output_path)
    
    return output_path


def create_video_from_image(
    image_path: Path,
    duration_seconds: float,
    output_path: Path
) -> Path:
    """
    Create a fixed-duration video that shows a single still image.
    
    Args:
        image_path: Path to the image
        duration_seconds: Length of the video in seconds
        output_path: Path to save the video
    
    Returns:
        Path to the generated video
    """
    image_path = _require_file(image_path, "Image source")
    if duration_seconds <= 0:
        raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")
    
    config = get_config()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    
    still = prepare_still_image(
        image_path,
        output_path.with_name(f"{output_path.stem}_still.png"),
        resolution=config.video.resolution
    )
    
    cmd = [
        config.ffmpeg_binary, "-y",
        "-loop", "1",
        "-i", str(still),
        "-t", str(duration_seconds),
        "-r", str(config.video.fps),
        "-c:v", config.video.codec
    ]
    # stillimage is an x264 tuning preset
    if config.video.codec == "libx264":
        cmd.extend(["-tune", "stillimage"])
    cmd.extend(["-pix_fmt", "yuv420p", str(output_path)])
    
    try:
        _run_media_tool(cmd)
    finally:
        still.unlink(missing_ok=True)
    
    return output_path


def combine_audio_and_video(
    video_path: Path,
    audio_paths: list[Path],
    output_path: Path
) -> Path:
    """
    Mux a video stream with one or more audio tracks into a single file.
    
    The first video stream of ``video_path`` is copied as-is. The first audio
    stream of every file in ``audio_paths`` becomes its own track, in order.
    No duration alignment or format checks are done.
    
    Args:
        video_path: Input video path
        audio_paths: Audio files to add as separate tracks
        output_path: Output video path
    
    Returns:
        Path to the output video
    """
    if not audio_paths:
        raise ValueError("At least one audio file is required")
    
    config = get_config()
    video_path = Path(video_path)
    audio_paths = [Path(p) for p in audio_paths]
    
    video_streams = [s for s in probe_streams(video_path) if s.codec_type == "video"]
    if not video_streams:
        raise ValueError(f"No video stream found in {video_path}")
    logger.info(f"  Video: {video_path} ({video_streams[0].codec_name})")
    
    for audio_path in audio_paths:
        audio_streams = [s for s in probe_streams(audio_path) if s.codec_type == "audio"]
        if not audio_streams:
            raise ValueError(f"No audio stream found in {audio_path}")
        logger.info(f"  Audio: {audio_path} ({audio_streams[0].codec_name})")
    
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    
    cmd = [config.ffmpeg_binary, "-y", "-i", str(video_path)]
    for audio_path in audio_paths:
        cmd.extend(["-i", str(audio_path)])
    
    cmd.extend(["-map", "0:v:0"])
    for i in range(1, len(audio_paths) + 1):
        cmd.extend(["-map", f"{i}:a:0"])
    
    cmd.extend([
        "-c:v", "copy",
        "-c:a", config.video.audio_codec,
        str(output_path)
    ])
    
    _run_media_tool(cmd)
    
    return output_path
