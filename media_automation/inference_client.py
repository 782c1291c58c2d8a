"""
Inference API client for MediaAutomation.
Sends text prompts to hosted music-generation and text-to-speech models
and returns the raw audio bytes they produce.
"""

import logging
from typing import Optional

import httpx

from .config import get_config


logger = logging.getLogger(__name__)


class InferenceClient:
    """
    Client for the two model endpoints used by a run.
    
    One ``httpx.Client`` is shared by both calls so the connection is reused.
    Use it as a context manager, or call ``close()`` when done.
    """
    
    def __init__(
        self,
        api_token: str,
        music_endpoint: Optional[str] = None,
        tts_endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize the client.
        
        Args:
            api_token: Bearer token for the inference API
            music_endpoint: Music model URL (uses config default if not provided)
            tts_endpoint: Text-to-speech model URL (uses config default if not provided)
            timeout: Request timeout in seconds (uses config default if not provided)
            transport: Optional httpx transport, mainly for tests
        """
        config = get_config()
        
        self.music_endpoint = music_endpoint or config.inference.music_endpoint
        self.tts_endpoint = tts_endpoint or config.inference.tts_endpoint
        
        self._client = httpx.Client(
            headers={"Authorization": f"Bearer {api_token}"},
            timeout=timeout if timeout is not None else config.inference.timeout_seconds,
            transport=transport
        )
    
    def __enter__(self) -> "InferenceClient":
        return self
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
    
    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()
    
    def _query(self, endpoint: str, prompt: str) -> bytes:
        """POST a prompt to a model endpoint and return the response body."""
        try:
            response = self._client.post(endpoint, json={"inputs": prompt})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Inference request to {endpoint} failed with status "
                f"{e.response.status_code}: {e.response.text[:200]}"
            )
            raise
        except httpx.HTTPError as e:
            logger.error(f"Inference request to {endpoint} failed: {e}")
            raise
        
        if not response.content:
            logger.warning(f"Inference endpoint {endpoint} returned an empty body")
        
        return response.content
    
    def generate_music(self, prompt: str) -> bytes:
        """
        Generate music from a text prompt.
        
        Args:
            prompt: Description of the desired music
        
        Returns:
            Raw audio bytes (MP3)
        
        Raises:
            httpx.HTTPError: If the request fails or returns a non-success status
        """
        return self._query(self.music_endpoint, prompt)
    
    def generate_voiceover(self, prompt: str) -> bytes:
        """
        Generate speech from text.
        
        Args:
            prompt: Text to speak
        
        Returns:
            Raw audio bytes (WAV)
        
        Raises:
            httpx.HTTPError: If the request fails or returns a non-success status
        """
        return self._query(self.tts_endpoint, prompt)
