"""Gemini adapter - implements ImageEditModel on the Google GenAI API."""

from __future__ import annotations

import base64
import logging
from typing import Any, Iterable

import httpx
from google.genai import Client, errors, types

from ...config import DEFAULT_MODEL_ID, DEFAULT_RESULT_MIME_TYPE, MISSING_CREDENTIAL_MESSAGE
from ...core.encoder import make_data_url
from ...domain.entities.image import EditResult
from ...exceptions import MissingCredentialError, TransportError

logger = logging.getLogger(__name__)


def extract_edit_result(parts: Iterable[Any] | None) -> EditResult:
    """Pick the generated image and text out of response parts.

    Parts are scanned in order; a later image part replaces an earlier one and
    a later text part replaces an earlier one.

    Args:
        parts: Response parts (objects with ``inline_data`` / ``text``)

    Returns:
        EditResult with whatever was found
    """
    image_url: str | None = None
    text: str | None = None

    for part in parts or ():
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            data = inline.data
            if isinstance(data, (bytes, bytearray)):
                data = base64.b64encode(data).decode("ascii")
            mime_type = inline.mime_type or DEFAULT_RESULT_MIME_TYPE
            image_url = make_data_url(mime_type, data)
        elif getattr(part, "text", None):
            text = part.text

    return EditResult(image_url=image_url, text=text)


def _response_parts(response: Any) -> list[Any]:
    """Parts of the first candidate, or an empty list."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


class GeminiImageClient:
    """Image editing client for Gemini image models.

    One ``edit`` call is one ``generate_content`` request: no streaming,
    no conversation history and no retries.
    """

    def __init__(
        self,
        api_key: str | None,
        model_id: str = DEFAULT_MODEL_ID,
        client: Client | None = None
    ):
        """Initialize the client.

        Args:
            api_key: Gemini API key (empty or None fails every edit)
            model_id: Model the requests are addressed to
            client: Pre-built GenAI client (built lazily from api_key if None)
        """
        self.api_key = (api_key or "").strip()
        self._model_id = model_id
        self._client = client

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> Client:
        if self._client is None:
            self._client = Client(api_key=self.api_key)
            logger.info(f"Using Gemini model {self._model_id}")
        return self._client

    def _build_contents(self, base64_image: str, mime_type: str, prompt: str) -> list[types.Content]:
        image_bytes = base64.b64decode(base64_image, validate=True)
        return [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    types.Part.from_text(text=prompt),
                ],
            )
        ]

    def edit(self, base64_image: str, mime_type: str, prompt: str) -> EditResult:
        """Send the image and instruction, return the generated output.

        Raises:
            MissingCredentialError: No API key configured (nothing is sent)
            TransportError: Network, API or response decoding failure
        """
        if not self.has_credential:
            raise MissingCredentialError(MISSING_CREDENTIAL_MESSAGE)

        try:
            contents = self._build_contents(base64_image, mime_type, prompt)
            logger.debug(f"Sending edit request to {self._model_id} ({mime_type})")
            response = self._get_client().models.generate_content(
                model=self._model_id,
                contents=contents,
            )
        except errors.APIError as e:
            logger.error(f"Gemini API error: {e}")
            raise TransportError(e.message or str(e), model_id=self._model_id) from e
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.error(f"Gemini request failed: {e}")
            raise TransportError(str(e), model_id=self._model_id) from e

        result = extract_edit_result(_response_parts(response))
        logger.info(
            f"Gemini response: image={'yes' if result.has_image else 'no'}, "
            f"text={'yes' if result.has_text else 'no'}"
        )
        return result
