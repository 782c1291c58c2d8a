#!/usr/bin/env python3
"""
MediaAutomation - Generated Music and Voiceover Video Builder

Generate music and a voiceover from text prompts and mux them onto a video.

Usage:
    python main.py --image image_source.jpg \\
                   --music-prompt "calm piano music" \\
                   --voiceover-prompt "Welcome to the channel" \\
                   --output final_output.mp4
"""

import argparse
import sys
from pathlib import Path

from media_automation.config import get_config, set_config, Config
from media_automation.pipeline import (
    run_automation,
    DEFAULT_MUSIC_PROMPT,
    DEFAULT_VOICEOVER_PROMPT,
)
from media_automation.video_assembler import check_ffmpeg_installation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate music and a voiceover and mux them onto a video",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Basic usage (token read from HF_API_TOKEN)
    python main.py
    
    # Custom prompts and a longer placeholder video
    python main.py --music-prompt "slow ambient pads" \\
                   --voiceover-prompt "Thanks for watching" --duration 20
    
    # Use an existing video instead of a still image
    python main.py --no-synthesize --video my_clip.mp4 -o out.mp4
    
    # Check installation
    python main.py --check
        """
    )
    
    parser.add_argument(
        "--music-prompt",
        type=str,
        default=DEFAULT_MUSIC_PROMPT,
        help="Prompt for the music model"
    )
    parser.add_argument(
        "--voiceover-prompt",
        type=str,
        default=DEFAULT_VOICEOVER_PROMPT,
        help="Text for the voiceover"
    )
    parser.add_argument(
        "-i", "--image",
        type=Path,
        help="Still image used for the placeholder video (default: image_source.jpg)"
    )
    parser.add_argument(
        "--video",
        type=Path,
        help="Placeholder video path, or the source video with --no-synthesize (default: video_source.mp4)"
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output video path (default: final_output.mp4)"
    )
    parser.add_argument(
        "-d", "--duration",
        type=int,
        help="Placeholder video duration in seconds (default: 10)"
    )
    parser.add_argument(
        "--no-synthesize",
        action="store_true",
        help="Do not create a video from the image; use --video as-is"
    )
    parser.add_argument(
        "--resolution",
        choices=["480p", "720p", "1080p"],
        help="Placeholder video resolution (default: 720p)"
    )
    parser.add_argument(
        "--token",
        type=str,
        help="Inference API token (default: HF_API_TOKEN)"
    )
    parser.add_argument(
        "--music-endpoint",
        type=str,
        help="Music model URL"
    )
    parser.add_argument(
        "--tts-endpoint",
        type=str,
        help="Text-to-speech model URL"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Check configuration and dependencies"
    )
    
    return parser


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Override configuration values with command line arguments."""
    if args.token:
        config.credential = args.token
    if args.image:
        config.image_path = args.image
    if args.video:
        config.video_path = args.video
    if args.output:
        config.output_path = args.output
    if args.duration is not None:
        config.video.duration_seconds = args.duration
    if args.resolution:
        config.video.resolution = args.resolution
    if args.no_synthesize:
        config.video.synthesize_video = False
    if args.music_endpoint:
        config.inference.music_endpoint = args.music_endpoint
    if args.tts_endpoint:
        config.inference.tts_endpoint = args.tts_endpoint
    return config


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    
    config = apply_args(get_config(), args)
    set_config(config)
    
    if args.check:
        print("Checking installation...")
        
        print(f"\nConfiguration:")
        issues = config.validate()
        if issues:
            for issue in issues:
                print(f"  ⚠ {issue}")
        else:
            print("  ✓ Configuration looks good")
        
        status = check_ffmpeg_installation()
        print(f"\nFFmpeg:  {'✓ Installed' if status['ffmpeg'] else '✗ Not found - Please install FFmpeg'}")
        print(f"FFprobe: {'✓ Installed' if status['ffprobe'] else '✗ Not found - Please install FFmpeg'}")
        return 0
    
    run_automation(
        music_prompt=args.music_prompt,
        voiceover_prompt=args.voiceover_prompt,
        config=config
    )
    
    # Outcomes are reported on the console only
    return 0


if __name__ == "__main__":
    sys.exit(main())
