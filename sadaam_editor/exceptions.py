"""Custom exceptions for Sadaam Editor."""

from enum import Enum
from pathlib import Path
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories surfaced to the session and the user."""
    VALIDATION = "VALIDATION_ERROR"
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    EMPTY_RESULT = "EMPTY_RESULT"
    CONFIGURATION = "CONFIG_ERROR"
    SESSION_BUSY = "SESSION_BUSY"
    EXPORT = "EXPORT_ERROR"


class SadaamEditorError(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description
        error_code: Optional error code for programmatic handling
    """

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or (self.kind.value if self.kind else None)

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(SadaamEditorError):
    """Error in configuration or settings.

    Attributes:
        config_key: The configuration key that caused the error (if applicable)
    """

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message)
        self.config_key = config_key


class ValidationError(SadaamEditorError):
    """Error validating inputs, e.g. a file that is not an image.

    Attributes:
        field: The field that failed validation (if applicable)
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class EncodingError(ValidationError):
    """A selected file could not be read for encoding.

    Attributes:
        path: Path of the unreadable file
    """

    def __init__(self, message: str, path: Optional[Path | str] = None):
        super().__init__(message, field="file")
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{super().__str__()} (file: {self.path})"
        return super().__str__()


class MissingCredentialError(SadaamEditorError):
    """No API key is configured for the model endpoint."""

    kind = ErrorKind.MISSING_CREDENTIAL


class TransportError(SadaamEditorError):
    """Network or protocol failure during the model exchange.

    Attributes:
        model_id: The model the request was addressed to
    """

    kind = ErrorKind.TRANSPORT_FAILURE

    def __init__(self, message: str, model_id: Optional[str] = None):
        super().__init__(message)
        self.model_id = model_id


class SessionBusyError(SadaamEditorError):
    """An edit was started while another one is still in flight."""

    kind = ErrorKind.SESSION_BUSY


class ExportError(SadaamEditorError):
    """Error re-encoding the result image for download.

    Attributes:
        export_format: Target format of the failed export
    """

    kind = ErrorKind.EXPORT

    def __init__(self, message: str, export_format: Optional[str] = None):
        super().__init__(message)
        self.export_format = export_format
