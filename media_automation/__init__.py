# MediaAutomation - Generated Music and Voiceover Video Builder
"""
Generate background music and a voiceover with hosted inference models,
then mux them onto a video made from a still image.
Uses an HTTP inference API (Hugging Face style) and FFmpeg.
"""

__version__ = "0.1.0"
