"""Client for the remote text generation service."""

from .text_client import TextGenerationClient, TextServiceUnavailable

__all__ = ["TextGenerationClient", "TextServiceUnavailable"]
