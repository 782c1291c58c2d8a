"""
Configuration management for MediaAutomation.
Handles the inference API token, endpoints, paths, and default settings.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


PLACEHOLDER_TOKEN = "YOUR_HUGGING_FACE_API_TOKEN"

DEFAULT_MUSIC_ENDPOINT = "https://api-inference.huggingface.co/models/facebook/musicgen-small"
DEFAULT_TTS_ENDPOINT = "https://api-inference.huggingface.co/models/facebook/mms-tts-eng"


class CredentialError(ValueError):
    """Raised when the API token is missing or still the placeholder."""


@dataclass
class InferenceConfig:
    """Remote inference API configuration."""
    music_endpoint: str = field(
        default_factory=lambda: os.getenv("MUSIC_ENDPOINT", DEFAULT_MUSIC_ENDPOINT)
    )
    tts_endpoint: str = field(
        default_factory=lambda: os.getenv("TTS_ENDPOINT", DEFAULT_TTS_ENDPOINT)
    )
    timeout_seconds: float = 100.0     # Model cold starts can be slow


@dataclass
class VideoConfig:
    """Video output configuration."""
    resolution: str = "720p"
    fps: int = 25
    codec: str = "libx264"
    audio_codec: str = "aac"
    duration_seconds: int = 10         # Length of the placeholder video
    synthesize_video: bool = True      # False: use an existing video_path as-is


@dataclass
class Config:
    """Main configuration class for MediaAutomation."""
    
    # API token (from environment variables)
    credential: str = field(default_factory=lambda: os.getenv("HF_API_TOKEN", ""))
    
    # Inputs
    image_path: Path = Path("image_source.jpg")
    video_path: Path = Path("video_source.mp4")
    
    # Outputs
    music_output: Path = Path("generated_music.mp3")
    voiceover_output: Path = Path("generated_voiceover.wav")
    output_path: Path = Path("final_output.mp4")
    
    # External media tool
    ffmpeg_binary: str = field(default_factory=lambda: os.getenv("FFMPEG_BINARY", "ffmpeg"))
    ffprobe_binary: str = field(default_factory=lambda: os.getenv("FFPROBE_BINARY", "ffprobe"))
    
    # Sub-configs
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    video: VideoConfig = field(default_factory=VideoConfig)
    
    def __post_init__(self):
        """Normalize path fields given as strings."""
        self.image_path = Path(self.image_path)
        self.video_path = Path(self.video_path)
        self.music_output = Path(self.music_output)
        self.voiceover_output = Path(self.voiceover_output)
        self.output_path = Path(self.output_path)
    
    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []
        
        if not self.credential or self.credential == PLACEHOLDER_TOKEN:
            issues.append("HF_API_TOKEN not set in environment")
        
        if self.video.duration_seconds <= 0:
            issues.append(f"Video duration must be positive, got {self.video.duration_seconds}")
        
        if self.video.synthesize_video and not Path(self.image_path).exists():
            issues.append(f"Image source not found: {self.image_path}")
        elif not self.video.synthesize_video and not Path(self.video_path).exists():
            issues.append(f"Video source not found: {self.video_path}")
        
        return issues


def ensure_credential(credential: Optional[str]) -> str:
    """
    Make sure the API token has been replaced with a real one.
    
    Args:
        credential: Token from configuration
    
    Returns:
        The token, unchanged
    
    Raises:
        CredentialError: If the token is empty or still the placeholder
    """
    if not credential or not credential.strip() or credential == PLACEHOLDER_TOKEN:
        raise CredentialError(
            f"Please replace '{PLACEHOLDER_TOKEN}' with your actual token "
            "(set HF_API_TOKEN in your environment or .env file)."
        )
    return credential


# Global default configuration
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
