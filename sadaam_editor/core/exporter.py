"""Re-encoding of the result image for download."""

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..config import (
    EXPORT_BACKGROUND,
    EXPORT_FILENAME_STEM,
    EXPORT_FORMATS,
    EXPORT_QUALITY,
    ExportFormat,
)
from ..exceptions import ExportError, ValidationError
from .encoder import parse_data_url

logger = logging.getLogger(__name__)

ImageSource = str | bytes | Image.Image


def export_filename(fmt: ExportFormat | str) -> str:
    """Download file name for a format, e.g. ``sadaam-edit.jpg``."""
    spec = EXPORT_FORMATS[ExportFormat(fmt)]
    return f"{EXPORT_FILENAME_STEM}.{spec.extension}"


def load_image(source: ImageSource) -> Image.Image:
    """Decode a result image from a data URL, raw bytes or a PIL image.

    Raises:
        ExportError: If the source cannot be decoded
    """
    if isinstance(source, Image.Image):
        return source

    try:
        if isinstance(source, str):
            _, source = parse_data_url(source)
        image = Image.open(io.BytesIO(source))
        image.load()
    except (ValidationError, UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ExportError(f"Could not decode result image: {e}") from e
    return image


def _draw_on_canvas(image: Image.Image, supports_alpha: bool) -> Image.Image:
    """Draw the image onto a canvas of its natural size.

    Formats without alpha get an opaque white canvas first so transparent
    pixels come out white instead of undefined.
    """
    rgba = image.convert("RGBA")
    if supports_alpha:
        canvas = Image.new("RGBA", rgba.size, (0, 0, 0, 0))
        canvas.alpha_composite(rgba)
        return canvas

    canvas = Image.new("RGB", rgba.size, EXPORT_BACKGROUND)
    canvas.paste(rgba, (0, 0), mask=rgba)
    return canvas


def render_export(
    source: ImageSource,
    fmt: ExportFormat | str,
    quality: int = EXPORT_QUALITY
) -> bytes:
    """Encode the result image in the chosen download format.

    Args:
        source: Result image (data URL, bytes or PIL image)
        fmt: Target format
        quality: Quality for lossy formats

    Returns:
        Encoded file content

    Raises:
        ExportError: If decoding or encoding fails
    """
    fmt = ExportFormat(fmt)
    spec = EXPORT_FORMATS[fmt]
    canvas = _draw_on_canvas(load_image(source), spec.supports_alpha)

    save_kwargs = {"quality": quality} if spec.lossy else {}
    buffer = io.BytesIO()
    try:
        canvas.save(buffer, format=spec.pil_format, **save_kwargs)
    except (OSError, ValueError, KeyError) as e:
        raise ExportError(f"Could not encode image as {fmt.value}: {e}", export_format=fmt.value) from e

    data = buffer.getvalue()
    logger.debug(f"Rendered {canvas.width}x{canvas.height} {fmt.value} export ({len(data)} bytes)")
    return data


def save_export(
    source: ImageSource,
    fmt: ExportFormat | str,
    directory: Path | str,
    quality: int = EXPORT_QUALITY
) -> Path:
    """Write the export to ``directory`` under the fixed download name.

    Returns:
        Path of the written file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    output_path = directory / export_filename(fmt)

    data = render_export(source, fmt, quality)
    try:
        output_path.write_bytes(data)
    except OSError as e:
        raise ExportError(f"Could not write {output_path}: {e}", export_format=ExportFormat(fmt).value) from e

    logger.info(f"Saved: {output_path}")
    return output_path
