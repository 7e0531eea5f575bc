"""Configuration and constants for the Sadaam Editor project."""

from dataclasses import dataclass
from enum import Enum


# Hosted image-capable generative model
DEFAULT_MODEL_ID = "gemini-2.5-flash-image"

# Used when the endpoint omits the MIME type of an inline image part
DEFAULT_RESULT_MIME_TYPE = "image/png"

# Fixed instruction bound to the quick action button
REMOVE_BACKGROUND_PROMPT = "Remove the background"

EMPTY_RESULT_MESSAGE = "The model didn't return an image or text. Try a different prompt."
MISSING_CREDENTIAL_MESSAGE = "API key is missing."


@dataclass(frozen=True)
class Suggestion:
    """A one-click prompt shown under the prompt box."""
    label: str
    prompt: str


SUGGESTIONS: tuple[Suggestion, ...] = (
    Suggestion("Watercolor", "Convert this image into a watercolor painting style"),
    Suggestion("Sunglasses", "Add a pair of cool sunglasses to the person"),
    Suggestion("Cyberpunk", "Change the background to a futuristic cyberpunk city with neon lights"),
    Suggestion("Sketch", "Turn this image into a charcoal sketch"),
    Suggestion("Vintage", "Apply a vintage 90s film grain filter"),
    Suggestion("Snowy", "Make it look like it is snowing"),
)


# Viewer pan/zoom
@dataclass(frozen=True)
class ViewerConfig:
    """Bounds and steps for the result viewer."""
    min_scale: float = 0.5
    max_scale: float = 5.0
    wheel_step: float = 0.2  # Per wheel notch
    button_step: float = 0.5  # Zoom in/out buttons


VIEWER_CONFIG = ViewerConfig()


class ExportFormat(str, Enum):
    """Download formats offered for the result image."""
    PNG = "png"
    JPG = "jpg"
    WEBP = "webp"


@dataclass(frozen=True)
class ExportFormatSpec:
    """How a download format is encoded."""
    pil_format: str
    mime_type: str
    extension: str
    supports_alpha: bool
    lossy: bool


EXPORT_FORMATS: dict[ExportFormat, ExportFormatSpec] = {
    ExportFormat.PNG: ExportFormatSpec(
        pil_format="PNG",
        mime_type="image/png",
        extension="png",
        supports_alpha=True,
        lossy=False,
    ),
    ExportFormat.JPG: ExportFormatSpec(
        pil_format="JPEG",
        mime_type="image/jpeg",
        extension="jpg",
        supports_alpha=False,
        lossy=True,
    ),
    ExportFormat.WEBP: ExportFormatSpec(
        pil_format="WEBP",
        mime_type="image/webp",
        extension="webp",
        supports_alpha=True,
        lossy=True,
    ),
}

EXPORT_QUALITY = 90  # Pillow quality for lossy formats
EXPORT_FILENAME_STEM = "sadaam-edit"
EXPORT_BACKGROUND = (255, 255, 255)  # Flattening color for formats without alpha


# File handling
# Used when the platform MIME table has no entry (e.g. .webp on some hosts)
IMAGE_MIME_TYPES: dict[str, str] = {
    '.png': "image/png",
    '.jpg': "image/jpeg",
    '.jpeg': "image/jpeg",
    '.jpe': "image/jpeg",
    '.webp': "image/webp",
    '.gif': "image/gif",
    '.bmp': "image/bmp",
    '.tiff': "image/tiff",
    '.tif': "image/tiff",
    '.heic': "image/heic",
    '.heif': "image/heif",
}

SUPPORTED_IMAGE_EXTENSIONS: tuple[str, ...] = tuple(IMAGE_MIME_TYPES)

IMAGE_MIME_PREFIX = "image/"


# Environment
ENV_FILE = ".env"
API_KEY_ENV = "GEMINI_API_KEY"
API_KEY_ENV_FALLBACK = "API_KEY"


# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
