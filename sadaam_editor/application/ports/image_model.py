"""Image Model port - interface for hosted image editing models."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ...domain.entities.image import EditResult


@runtime_checkable
class ImageEditModel(Protocol):
    """Port for a model that edits an image from a text instruction.

    Implementations: Gemini (google-genai).
    """

    @property
    def model_id(self) -> str:
        """Identifier of the model requests are addressed to."""
        ...

    def edit(self, base64_image: str, mime_type: str, prompt: str) -> EditResult:
        """Run one request/response exchange.

        Args:
            base64_image: Image payload without data URL prefix
            mime_type: MIME type of the image payload
            prompt: Natural-language edit instruction

        Returns:
            Result with an optional image data URL and optional text

        Raises:
            MissingCredentialError: No API key configured (no request is made)
            TransportError: The exchange failed
        """
        ...
