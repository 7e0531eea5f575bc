"""Pan/zoom controller for the result viewer.

Kept free of Qt so the widget in ``gui.zoomable_view`` only forwards pointer
events here and paints with the resulting transform.
"""

import logging
from typing import Hashable

from ..config import VIEWER_CONFIG
from ..domain.value_objects.viewer import ViewerTransform

logger = logging.getLogger(__name__)


class ViewerState:
    """Zoom, pan and drag state of one image view."""

    def __init__(self):
        self.transform = ViewerTransform.identity()
        self._source_key: Hashable | None = None
        self._dragging = False
        self._drag_start = (0.0, 0.0)

    @property
    def scale(self) -> float:
        return self.transform.scale

    @property
    def offset(self) -> tuple[float, float]:
        return self.transform.offset_x, self.transform.offset_y

    @property
    def zoom_percent(self) -> int:
        return round(self.transform.scale * 100)

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    # Zoom

    def wheel(self, delta_y: float) -> None:
        """Zoom by one step against the wheel direction (scroll up zooms in)."""
        if delta_y == 0:
            return
        direction = -1.0 if delta_y > 0 else 1.0
        self.transform = self.transform.zoomed_by(direction * VIEWER_CONFIG.wheel_step)

    def zoom_in(self) -> None:
        self.transform = self.transform.zoomed_by(VIEWER_CONFIG.button_step)

    def zoom_out(self) -> None:
        self.transform = self.transform.zoomed_by(-VIEWER_CONFIG.button_step)

    def reset_view(self) -> None:
        self.transform = ViewerTransform.identity()

    # Pan

    def begin_drag(self, x: float, y: float) -> None:
        """Start a drag at pointer position (x, y)."""
        self._dragging = True
        self._drag_start = (x - self.transform.offset_x, y - self.transform.offset_y)

    def drag_to(self, x: float, y: float) -> None:
        """Move the image with the pointer; no-op when not dragging."""
        if not self._dragging:
            return
        start_x, start_y = self._drag_start
        self.transform = self.transform.translated_to(x - start_x, y - start_y)

    def end_drag(self) -> None:
        """Release the drag (pointer up or pointer left the view)."""
        self._dragging = False

    # Source tracking

    def set_source(self, key: Hashable | None) -> bool:
        """Register the identity of the displayed image.

        Returns:
            True if the source changed and the view was reset
        """
        if key == self._source_key:
            return False
        self._source_key = key
        self._dragging = False
        self.reset_view()
        logger.debug("Viewer source changed, view reset")
        return True
