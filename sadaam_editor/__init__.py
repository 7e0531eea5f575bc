"""Sadaam Editor - natural-language image editing with Gemini image models."""

__version__ = "1.0.0"

from .config import DEFAULT_MODEL_ID, ExportFormat, REMOVE_BACKGROUND_PROMPT
from .core import (
    EditSession,
    SessionPhase,
    ViewerState,
    encode_file,
    render_export,
    save_export,
)
from .domain import EditorConfig, EditResult, InputImage, ViewerTransform
from .exceptions import (
    ErrorKind,
    SadaamEditorError,
    ConfigurationError,
    ValidationError,
    EncodingError,
    MissingCredentialError,
    TransportError,
    SessionBusyError,
    ExportError,
)
from .utils.env import setup_logging

__all__ = [
    '__version__',
    'DEFAULT_MODEL_ID',
    'ExportFormat',
    'REMOVE_BACKGROUND_PROMPT',
    'EditorConfig',
    'EditResult',
    'InputImage',
    'ViewerTransform',
    'EditSession',
    'SessionPhase',
    'ViewerState',
    'encode_file',
    'render_export',
    'save_export',
    'setup_logging',
    # Exceptions
    'ErrorKind',
    'SadaamEditorError',
    'ConfigurationError',
    'ValidationError',
    'EncodingError',
    'MissingCredentialError',
    'TransportError',
    'SessionBusyError',
    'ExportError',
]
