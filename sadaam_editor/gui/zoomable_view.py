"""Pan/zoom image widget for the result panel."""

import logging

from PyQt6.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QPainter, QPixmap
from PyQt6.QtWidgets import QFrame, QHBoxLayout, QLabel, QToolButton, QWidget

from ..core.encoder import parse_data_url
from ..core.viewer import ViewerState
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

VIEW_BACKGROUND = "#151a23"
CONTROLS_MARGIN = 12


class ZoomableImageView(QWidget):
    """Displays one image with wheel/button zoom and drag-to-pan.

    The transform lives in a ``ViewerState``; this widget only translates Qt
    events into state calls and paints the pixmap accordingly. Loading a new
    source resets the view.
    """

    zoom_changed = pyqtSignal(int)  # percent

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.state = ViewerState()
        self._pixmap: QPixmap | None = None
        self._placeholder = "No result yet"

        self.setMinimumSize(320, 320)
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self._create_controls()

    def _create_controls(self) -> None:
        """Create the floating zoom-out / percent / zoom-in / reset bar."""
        self.controls = QFrame(self)
        self.controls.setObjectName("zoomControls")
        layout = QHBoxLayout(self.controls)
        layout.setContentsMargins(8, 2, 8, 2)
        layout.setSpacing(4)

        zoom_out_btn = QToolButton()
        zoom_out_btn.setText("-")
        zoom_out_btn.setToolTip("Zoom Out")
        zoom_out_btn.clicked.connect(self.zoom_out)
        layout.addWidget(zoom_out_btn)

        self.zoom_label = QLabel("100%")
        self.zoom_label.setFixedWidth(44)
        self.zoom_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.zoom_label)

        zoom_in_btn = QToolButton()
        zoom_in_btn.setText("+")
        zoom_in_btn.setToolTip("Zoom In")
        zoom_in_btn.clicked.connect(self.zoom_in)
        layout.addWidget(zoom_in_btn)

        reset_btn = QToolButton()
        reset_btn.setText("Reset")
        reset_btn.setToolTip("Reset View")
        reset_btn.clicked.connect(self.reset_view)
        layout.addWidget(reset_btn)

        self.controls.adjustSize()
        self.controls.hide()

    # ------------------------------------------------------------------
    # Source
    # ------------------------------------------------------------------

    def set_image_data_url(self, data_url: str) -> bool:
        """Show an image given as a base64 data URL.

        Returns:
            True if the image could be decoded
        """
        try:
            _, data = parse_data_url(data_url)
        except ValidationError as e:
            logger.warning(f"Cannot display result image: {e}")
            self.clear()
            return False

        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            logger.warning("Cannot display result image: unsupported image data")
            self.clear()
            return False

        self.set_pixmap(pixmap, source_key=data_url)
        return True

    def set_pixmap(self, pixmap: QPixmap, source_key: object) -> None:
        self._pixmap = pixmap
        self.state.set_source(source_key)
        self.controls.show()
        self._position_controls()
        self._refresh()

    def clear(self, placeholder: str | None = None) -> None:
        self._pixmap = None
        self.state.set_source(None)
        if placeholder is not None:
            self._placeholder = placeholder
        self.controls.hide()
        self._refresh()

    def has_image(self) -> bool:
        return self._pixmap is not None

    # ------------------------------------------------------------------
    # Zoom controls
    # ------------------------------------------------------------------

    def zoom_in(self) -> None:
        self.state.zoom_in()
        self._refresh()

    def zoom_out(self) -> None:
        self.state.zoom_out()
        self._refresh()

    def reset_view(self) -> None:
        self.state.reset_view()
        self._refresh()

    def _refresh(self) -> None:
        self.zoom_label.setText(f"{self.state.zoom_percent}%")
        self.zoom_changed.emit(self.state.zoom_percent)
        self.update()

    def _position_controls(self) -> None:
        self.controls.adjustSize()
        x = (self.width() - self.controls.width()) // 2
        y = self.height() - self.controls.height() - CONTROLS_MARGIN
        self.controls.move(max(x, 0), max(y, 0))

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def wheelEvent(self, event):
        if self._pixmap is None:
            return
        # Qt reports positive y when scrolling away from the user
        self.state.wheel(-event.angleDelta().y())
        self._refresh()
        event.accept()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton and self._pixmap is not None:
            pos = event.position()
            self.state.begin_drag(pos.x(), pos.y())
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()

    def mouseMoveEvent(self, event):
        if self.state.is_dragging:
            pos = event.position()
            self.state.drag_to(pos.x(), pos.y())
            self.update()
            event.accept()

    def mouseReleaseEvent(self, event):
        self._release_drag()

    def leaveEvent(self, event):
        self._release_drag()
        super().leaveEvent(event)

    def resizeEvent(self, event):
        self._position_controls()
        super().resizeEvent(event)

    def _release_drag(self) -> None:
        self.state.end_drag()
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.fillRect(self.rect(), QColor(VIEW_BACKGROUND))

        if self._pixmap is None or self._pixmap.isNull():
            painter.setPen(QColor("#a4adbb"))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, self._placeholder)
            painter.end()
            return

        # Fit inside the widget (never upscale), then apply the view transform
        pw, ph = self._pixmap.width(), self._pixmap.height()
        fit = min(self.width() / pw, self.height() / ph, 1.0)
        scale = fit * self.state.scale
        w, h = pw * scale, ph * scale

        offset_x, offset_y = self.state.offset
        center = QPointF(self.width() / 2 + offset_x, self.height() / 2 + offset_y)
        target = QRectF(center.x() - w / 2, center.y() - h / 2, w, h)
        painter.drawPixmap(target, self._pixmap, QRectF(self._pixmap.rect()))
        painter.end()
