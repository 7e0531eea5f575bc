"""Viewer value objects."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ...config import VIEWER_CONFIG

MIN_SCALE = VIEWER_CONFIG.min_scale
MAX_SCALE = VIEWER_CONFIG.max_scale


def clamp_scale(scale: float) -> float:
    """Clamp a zoom factor to [MIN_SCALE, MAX_SCALE]."""
    return min(max(MIN_SCALE, scale), MAX_SCALE)


@dataclass(frozen=True, slots=True)
class ViewerTransform:
    """Zoom factor and pan offset applied to the displayed image."""
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self) -> None:
        if not MIN_SCALE <= self.scale <= MAX_SCALE:
            raise ValueError(
                f"scale must be within [{MIN_SCALE}, {MAX_SCALE}], got {self.scale}"
            )

    @classmethod
    def identity(cls) -> ViewerTransform:
        return cls()

    @property
    def is_identity(self) -> bool:
        return self.scale == 1.0 and self.offset_x == 0.0 and self.offset_y == 0.0

    def zoomed_by(self, delta: float) -> ViewerTransform:
        """Return a copy with the scale shifted by ``delta`` and clamped."""
        return replace(self, scale=clamp_scale(self.scale + delta))

    def translated_to(self, x: float, y: float) -> ViewerTransform:
        """Return a copy with the offset set to (x, y)."""
        return replace(self, offset_x=x, offset_y=y)
