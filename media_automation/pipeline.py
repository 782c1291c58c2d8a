"""
Main Pipeline Orchestrator for MediaAutomation.
Runs music generation, voiceover generation and video assembly one after another.
"""

import subprocess
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
import logging

import httpx

from .config import Config, CredentialError, ensure_credential, get_config, set_config
from .inference_client import InferenceClient
from .video_assembler import create_video_from_image, combine_audio_and_video


# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


DEFAULT_MUSIC_PROMPT = (
    "light, calm, inspirational music with a gentle piano melody, "
    "upbeat drums, and a hint of a soft synth pad"
)
DEFAULT_VOICEOVER_PROMPT = "Hello, this is a test of the Text-to-Speech API."

TOTAL_STEPS = 5


@dataclass
class RunResult:
    """Result of a pipeline run."""
    success: bool
    output_path: Optional[Path] = None
    music_path: Optional[Path] = None
    voiceover_path: Optional[Path] = None
    video_path: Optional[Path] = None
    error: Optional[str] = None
    generation_errors: dict = field(default_factory=dict)


def save_audio(data: bytes, output_path: Path) -> Path:
    """Write generated audio bytes to disk."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    return output_path


class MediaAutomationPipeline:
    """
    Sequential pipeline: credential check, two generation calls, video assembly.
    
    A failed generation call only drops that audio track. A missing source
    file or a media tool failure ends the run.
    """
    
    def __init__(self, config: Config = None, transport: Optional[httpx.BaseTransport] = None):
        """Initialize the pipeline with configuration."""
        self.config = config or get_config()
        # Media assembly functions read the global config
        set_config(self.config)
        self.transport = transport
    
    def _generate(self, label: str, generate, prompt: str, output_path: Path, result: RunResult) -> Optional[Path]:
        print(f"Generating {label} for prompt: '{prompt}'...")
        try:
            data = generate(prompt)
            if not data:
                raise ValueError("the model returned no audio")
            path = save_audio(data, output_path)
        except (httpx.HTTPError, OSError, ValueError) as e:
            print(f"An error occurred during {label} generation: {e}")
            result.generation_errors[label] = str(e)
            return None
        
        print(f"{label.capitalize()} successfully generated and saved to {path}")
        return path
    
    def run(
        self,
        music_prompt: str = DEFAULT_MUSIC_PROMPT,
        voiceover_prompt: str = DEFAULT_VOICEOVER_PROMPT
    ) -> RunResult:
        """
        Run every stage in order.
        
        Args:
            music_prompt: Description of the background music
            voiceover_prompt: Text for the voiceover
        
        Returns:
            RunResult describing what was produced
        """
        config = self.config
        result = RunResult(success=False)
        
        # Step 1: Validate credential
        logger.info(f"Step 1/{TOTAL_STEPS}: Validating API token...")
        try:
            token = ensure_credential(config.credential)
        except CredentialError as e:
            print(e)
            result.error = str(e)
            return result
        
        with InferenceClient(
            token,
            music_endpoint=config.inference.music_endpoint,
            tts_endpoint=config.inference.tts_endpoint,
            timeout=config.inference.timeout_seconds,
            transport=self.transport
        ) as client:
            # Step 2: Music
            logger.info(f"Step 2/{TOTAL_STEPS}: Generating music...")
            result.music_path = self._generate(
                "music", client.generate_music, music_prompt, config.music_output, result
            )
            print()
            
            # Step 3: Voiceover
            logger.info(f"Step 3/{TOTAL_STEPS}: Generating voiceover...")
            result.voiceover_path = self._generate(
                "voiceover", client.generate_voiceover, voiceover_prompt, config.voiceover_output, result
            )
            print()
        
        # Step 4: Check the video source
        logger.info(f"Step 4/{TOTAL_STEPS}: Checking video source...")
        if config.video.synthesize_video:
            source = Path(config.image_path)
            if not source.exists():
                result.error = f"The image source file '{source}' was not found. Please add a JPG file at that path."
                print(result.error)
                return result
        else:
            source = Path(config.video_path)
            if not source.exists():
                result.error = f"The video source file '{source}' was not found. Please add a video file at that path."
                print(result.error)
                return result
        
        audio_paths = [p for p in (result.music_path, result.voiceover_path) if p is not None]
        
        # Step 5: Assemble
        logger.info(f"Step 5/{TOTAL_STEPS}: Assembling final video...")
        try:
            if config.video.synthesize_video:
                result.video_path = create_video_from_image(
                    config.image_path,
                    config.video.duration_seconds,
                    config.video_path
                )
                print(f"Video successfully created from image and saved to {result.video_path}")
            else:
                result.video_path = Path(config.video_path)
            
            if not audio_paths:
                result.error = "No audio tracks were generated; skipping the final combination step."
                print(result.error)
                return result
            
            result.output_path = combine_audio_and_video(
                result.video_path,
                audio_paths,
                config.output_path
            )
        except (subprocess.CalledProcessError, OSError, ValueError) as e:
            logger.error(f"Video assembly failed: {e}")
            print(f"An error occurred during video assembly: {e}")
            result.error = str(e)
            return result
        
        print(f"Final video successfully saved to {result.output_path}")
        result.success = True
        return result


def run_automation(
    music_prompt: str = DEFAULT_MUSIC_PROMPT,
    voiceover_prompt: str = DEFAULT_VOICEOVER_PROMPT,
    config: Config = None
) -> RunResult:
    """
    Convenience function to run the whole automation.
    
    This is the main entry point for a run.
    """
    pipeline = MediaAutomationPipeline(config)
    return pipeline.run(music_prompt=music_prompt, voiceover_prompt=voiceover_prompt)
