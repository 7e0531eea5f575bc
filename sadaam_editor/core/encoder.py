"""Encoding of user-selected image files into transport-ready payloads."""

import base64
import binascii
import logging
import mimetypes
from pathlib import Path

from ..config import IMAGE_MIME_PREFIX, IMAGE_MIME_TYPES
from ..domain.entities.image import InputImage
from ..exceptions import EncodingError, ValidationError

logger = logging.getLogger(__name__)

_DATA_URL_SCHEME = "data:"
_BASE64_MARKER = ";base64,"


def guess_mime_type(path: Path | str) -> str | None:
    """Guess the declared content type of a file from its name."""
    mime_type, _ = mimetypes.guess_type(str(path))
    if mime_type is None:
        mime_type = IMAGE_MIME_TYPES.get(Path(path).suffix.lower())
    return mime_type


def is_image_mime_type(mime_type: str | None) -> bool:
    """Check whether a content type belongs to the image category."""
    return bool(mime_type) and mime_type.lower().startswith(IMAGE_MIME_PREFIX)


def make_data_url(mime_type: str, base64_data: str) -> str:
    """Build a ``data:`` URL from a MIME type and a base64 payload."""
    return f"{_DATA_URL_SCHEME}{mime_type}{_BASE64_MARKER}{base64_data}"


def parse_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 ``data:`` URL into its MIME type and decoded bytes.

    Args:
        data_url: URL of the form ``data:<mime>;base64,<payload>``

    Returns:
        Tuple of (mime_type, raw_bytes)

    Raises:
        ValidationError: If the URL is not a base64 data URL
    """
    if not data_url.startswith(_DATA_URL_SCHEME) or _BASE64_MARKER not in data_url:
        raise ValidationError("Not a base64 data URL", field="data_url")

    header, payload = data_url[len(_DATA_URL_SCHEME):].split(_BASE64_MARKER, 1)
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 payload: {e}", field="data_url") from e
    return header, raw


def encode_bytes(
    data: bytes,
    mime_type: str | None,
    source_path: Path | None = None
) -> InputImage:
    """Encode in-memory image content.

    Args:
        data: Raw file content
        mime_type: Declared content type
        source_path: Originating file, if any

    Returns:
        InputImage with matching base64 payload and data URL

    Raises:
        ValidationError: If the content type is not an image type
    """
    if not is_image_mime_type(mime_type):
        raise ValidationError(
            f"Unsupported file type: {mime_type or 'unknown'}. Please select an image.",
            field="mime_type"
        )

    base64_data = base64.b64encode(data).decode("ascii")
    return InputImage(
        data_url=make_data_url(mime_type, base64_data),
        base64_data=base64_data,
        mime_type=mime_type,
        source_path=source_path,
    )


def encode_file(path: Path | str, mime_type: str | None = None) -> InputImage:
    """Read an image file and encode it.

    The content type is checked before the file is opened, so a non-image
    file is rejected without any I/O.

    Args:
        path: File to encode
        mime_type: Declared content type (guessed from the name if None)

    Returns:
        Encoded InputImage

    Raises:
        ValidationError: If the file is not declared as an image
        EncodingError: If the file cannot be read
    """
    path = Path(path)
    declared = mime_type or guess_mime_type(path)

    if not is_image_mime_type(declared):
        raise ValidationError(
            f"Unsupported file type: {declared or 'unknown'}. Please select an image.",
            field="mime_type"
        )

    try:
        data = path.read_bytes()
    except OSError as e:
        raise EncodingError(f"Could not read file: {e.strerror or e}", path=path) from e

    image = encode_bytes(data, declared, source_path=path)
    logger.debug(f"Encoded {path.name} ({declared}, {len(data)} bytes)")
    return image
