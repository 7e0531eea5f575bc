"""Image entities - the edit input and the model output."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class InputImage:
    """Image selected by the user, encoded for display and transport.

    ``data_url`` and ``base64_data`` are derived from the same bytes when the
    image is encoded and never change afterwards.
    """
    data_url: str
    base64_data: str  # No "data:...;base64," prefix
    mime_type: str
    source_path: Path | None = None

    @property
    def name(self) -> str:
        if self.source_path is None:
            return "image"
        return self.source_path.name


@dataclass(frozen=True, slots=True)
class EditResult:
    """Output of one model exchange.

    Either field may be missing. A result with neither is not a success.
    """
    image_url: str | None = None
    text: str | None = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    @property
    def has_text(self) -> bool:
        return bool(self.text)

    @property
    def has_output(self) -> bool:
        return self.has_image or self.has_text
