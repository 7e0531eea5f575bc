"""
Sadaam Editor - PyQt6 GUI
Edit images with natural-language instructions using Gemini image models.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QPushButton, QPlainTextEdit, QTextEdit, QComboBox, QFileDialog,
    QFrame, QSplitter, QMessageBox, QGroupBox, QInputDialog, QLineEdit,
    QSizePolicy
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPixmap, QKeySequence, QShortcut, QDragEnterEvent, QDropEvent

from ..adapters.models import create_image_model
from ..application.ports.event_publisher import SessionEvent
from ..config import (
    EXPORT_FORMATS,
    REMOVE_BACKGROUND_PROMPT,
    SUGGESTIONS,
    SUPPORTED_IMAGE_EXTENSIONS,
    ExportFormat,
)
from ..core.encoder import encode_file, parse_data_url
from ..core.exporter import export_filename, render_export
from ..core.session import EditSession, SessionPhase
from ..domain.value_objects.config import EditorConfig
from ..exceptions import ExportError, SessionBusyError, ValidationError
from ..utils.env import load_api_key, save_api_key, setup_logging

from .processing_controller import ProcessingController
from .settings_manager import SettingsManager
from .zoomable_view import ZoomableImageView

# Module logger
logger = logging.getLogger(__name__)

INPUT_PREVIEW_HEIGHT = 260


# ============================================================================
# Color Scheme
# ============================================================================
class Theme:
    """Dark slate theme with banana accent."""
    BG_DARK = "#0f172a"
    BG_MEDIUM = "#1e293b"
    SURFACE = "#162033"
    ACCENT = "#facc15"
    ACCENT_HOVER = "#fde047"
    TEXT = "#f1f5f9"
    TEXT_DIM = "#94a3b8"
    SUCCESS = "#2ed573"
    WARNING = "#f1c40f"
    ERROR = "#f87171"
    ERROR_BG = "#3b1219"
    BORDER = "#334155"
    BORDER_LIGHT = "#475569"


# ============================================================================
# Stylesheet
# ============================================================================
STYLESHEET = f"""
QMainWindow {{
    background-color: {Theme.BG_DARK};
    color: {Theme.TEXT};
    font-size: 10pt;
}}

QLabel {{
    color: {Theme.TEXT};
}}

QGroupBox {{
    font-weight: 600;
    color: {Theme.TEXT};
    border: 1px solid {Theme.BORDER};
    border-radius: 10px;
    background-color: {Theme.SURFACE};
    margin-top: 14px;
    padding: 12px;
}}

QGroupBox::title {{
    subcontrol-origin: margin;
    left: 12px;
    padding: 0 8px;
    color: {Theme.TEXT_DIM};
}}

QPushButton {{
    background-color: {Theme.BG_MEDIUM};
    color: {Theme.TEXT};
    border: 1px solid {Theme.BORDER};
    border-radius: 8px;
    padding: 7px 14px;
}}

QPushButton:hover {{
    border: 1px solid {Theme.ACCENT};
}}

QPushButton:disabled {{
    color: {Theme.TEXT_DIM};
    border: 1px solid {Theme.BORDER};
}}

QPushButton#primaryButton {{
    background: qlineargradient(x1:0, y1:0, x2:1, y2:0,
        stop:0 {Theme.ACCENT}, stop:1 {Theme.ACCENT_HOVER});
    color: {Theme.BG_DARK};
    border: none;
    font-size: 12pt;
    font-weight: 700;
    padding: 12px 22px;
}}

QPushButton#primaryButton:disabled {{
    background: {Theme.BG_MEDIUM};
    color: {Theme.TEXT_DIM};
}}

QPlainTextEdit, QTextEdit, QComboBox {{
    background-color: {Theme.BG_MEDIUM};
    color: {Theme.TEXT};
    border: 1px solid {Theme.BORDER};
    border-radius: 8px;
    padding: 8px;
}}

QPlainTextEdit:focus {{
    border: 1px solid {Theme.ACCENT};
}}

#zoomControls {{
    background-color: rgba(15, 23, 42, 200);
    border: 1px solid {Theme.BORDER};
    border-radius: 12px;
}}

#inputPreview {{
    background-color: {Theme.BG_MEDIUM};
    border: 2px dashed {Theme.BORDER_LIGHT};
    border-radius: 12px;
    color: {Theme.TEXT_DIM};
}}

#errorLabel {{
    background-color: {Theme.ERROR_BG};
    color: {Theme.ERROR};
    border: 1px solid {Theme.ERROR};
    border-radius: 10px;
    padding: 10px;
}}

#headerFrame {{
    background-color: {Theme.SURFACE};
    border-bottom: 1px solid {Theme.BORDER};
}}

#headerLabel {{
    font-size: 18pt;
    font-weight: 700;
    color: {Theme.ACCENT};
}}

#modelLabel, #statusLabel, #charCountLabel {{
    color: {Theme.TEXT_DIM};
}}
"""


# ============================================================================
# Main Window
# ============================================================================
class MainWindow(QMainWindow):
    """Main application window.

    Uses:
    - EditSession: owns image, prompt and edit outcome
    - ProcessingController: runs model exchanges in the background
    - ZoomableImageView: result display with pan/zoom
    - SettingsManager: persists preferences
    """

    def __init__(self, config: EditorConfig | None = None):
        super().__init__()
        self.setWindowTitle("Sadaam Editor")
        self.setMinimumSize(1100, 760)
        self.resize(1320, 860)

        # Accept drag and drop
        self.setAcceptDrops(True)

        self.config = config or EditorConfig(api_key=load_api_key() or "")
        self.settings_manager = SettingsManager()
        self.session = EditSession()
        self.processing_controller = ProcessingController(self.session, create_image_model(self.config))
        self.processing_controller.add_log_callback(self.log)
        self.session.publisher.subscribe(self._on_session_event)

        self._create_ui()
        self._setup_shortcuts()
        self.settings_manager.load_all(self)
        self.setStyleSheet(STYLESHEET)
        self._update_controls()

        self.log("Application started. Select or drop an image to begin.", "info")
        if not self.config.has_credential:
            self.log("No API key configured. Use 'API Key...' in the header.", "warning")

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _create_ui(self):
        """Create the main user interface."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        self._create_header(main_layout)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self._create_input_panel())
        splitter.addWidget(self._create_result_panel())
        splitter.setSizes([560, 760])

        content = QWidget()
        content_layout = QHBoxLayout(content)
        content_layout.setContentsMargins(15, 10, 15, 10)
        content_layout.addWidget(splitter)
        main_layout.addWidget(content, 1)

        self.status_label = QLabel("Ready")
        self.status_label.setObjectName("statusLabel")
        self.status_label.setContentsMargins(20, 4, 20, 8)
        main_layout.addWidget(self.status_label)

    def _create_header(self, parent_layout):
        """Create the header section."""
        header = QFrame()
        header.setObjectName("headerFrame")
        header.setFixedHeight(60)

        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(20, 0, 20, 0)

        title = QLabel("Sadaam Editor")
        title.setObjectName("headerLabel")
        header_layout.addWidget(title)
        header_layout.addStretch()

        self.model_label = QLabel(self.config.model_id)
        self.model_label.setObjectName("modelLabel")
        header_layout.addWidget(self.model_label)

        api_key_btn = QPushButton("API Key...")
        api_key_btn.clicked.connect(self._edit_api_key)
        header_layout.addWidget(api_key_btn)

        parent_layout.addWidget(header)

    def _create_input_panel(self) -> QWidget:
        """Create the left panel: upload, prompt and generate."""
        panel = QWidget()
        layout = QVBoxLayout(panel)
        layout.setSpacing(10)

        # Step 1: image
        upload_group = QGroupBox("1  Upload Image")
        upload_layout = QVBoxLayout(upload_group)

        self.input_preview = QLabel("Click 'Select Image' or drop an image here")
        self.input_preview.setObjectName("inputPreview")
        self.input_preview.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.input_preview.setFixedHeight(INPUT_PREVIEW_HEIGHT)
        self.input_preview.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        upload_layout.addWidget(self.input_preview)

        upload_buttons = QHBoxLayout()
        self.select_btn = QPushButton("Select Image")
        self.select_btn.setToolTip("Open an image (Ctrl+O)")
        self.select_btn.clicked.connect(self.select_file)
        upload_buttons.addWidget(self.select_btn)

        self.remove_image_btn = QPushButton("Remove")
        self.remove_image_btn.clicked.connect(self.remove_input_image)
        upload_buttons.addWidget(self.remove_image_btn)
        upload_buttons.addStretch()
        upload_layout.addLayout(upload_buttons)
        layout.addWidget(upload_group)

        # Step 2: prompt
        prompt_group = QGroupBox("2  Describe Edit")
        prompt_layout = QVBoxLayout(prompt_group)

        prompt_toolbar = QHBoxLayout()
        prompt_toolbar.addStretch()
        self.remove_bg_btn = QPushButton("Remove Background")
        self.remove_bg_btn.setToolTip("Remove background from image")
        self.remove_bg_btn.clicked.connect(self.remove_background)
        prompt_toolbar.addWidget(self.remove_bg_btn)
        prompt_layout.addLayout(prompt_toolbar)

        self.prompt_input = QPlainTextEdit()
        self.prompt_input.setPlaceholderText("e.g. Put me in a mosque and don't change the face...")
        self.prompt_input.setFixedHeight(110)
        self.prompt_input.textChanged.connect(self._on_prompt_changed)
        prompt_layout.addWidget(self.prompt_input)

        self.char_count_label = QLabel("0 chars")
        self.char_count_label.setObjectName("charCountLabel")
        self.char_count_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        prompt_layout.addWidget(self.char_count_label)

        prompt_layout.addWidget(QLabel("Try these ideas:"))
        suggestions_layout = QGridLayout()
        self.suggestion_buttons: list[QPushButton] = []
        for i, suggestion in enumerate(SUGGESTIONS):
            btn = QPushButton(suggestion.label)
            btn.setToolTip(suggestion.prompt)
            btn.clicked.connect(lambda _checked, p=suggestion.prompt: self.prompt_input.setPlainText(p))
            suggestions_layout.addWidget(btn, i // 3, i % 3)
            self.suggestion_buttons.append(btn)
        prompt_layout.addLayout(suggestions_layout)
        layout.addWidget(prompt_group)

        self.generate_btn = QPushButton("Generate")
        self.generate_btn.setObjectName("primaryButton")
        self.generate_btn.setToolTip("Run the edit (Ctrl+Enter)")
        self.generate_btn.clicked.connect(self.generate)
        layout.addWidget(self.generate_btn)

        self.error_label = QLabel("")
        self.error_label.setObjectName("errorLabel")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        layout.addStretch()
        return panel

    def _create_result_panel(self) -> QWidget:
        """Create the right panel: result view, export and activity log."""
        panel = QWidget()
        layout = QVBoxLayout(panel)
        layout.setSpacing(10)

        result_group = QGroupBox("3  Result")
        result_layout = QVBoxLayout(result_group)

        self.result_view = ZoomableImageView()
        self.result_view.clear("Your edited image will appear here")
        result_layout.addWidget(self.result_view, 1)

        self.result_text = QLabel("")
        self.result_text.setWordWrap(True)
        self.result_text.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self.result_text.hide()
        result_layout.addWidget(self.result_text)

        export_row = QHBoxLayout()
        export_row.addWidget(QLabel("Format:"))
        self.format_combo = QComboBox()
        for fmt in ExportFormat:
            self.format_combo.addItem(fmt.value.upper(), fmt.value)
        self.format_combo.currentIndexChanged.connect(
            lambda _: self.settings_manager.save_single("export/format", self.format_combo.currentData())
        )
        export_row.addWidget(self.format_combo)

        self.download_btn = QPushButton("Download")
        self.download_btn.setToolTip("Save the result (Ctrl+S)")
        self.download_btn.clicked.connect(self.download_result)
        export_row.addWidget(self.download_btn)
        export_row.addStretch()

        self.reset_btn = QPushButton("Start Over")
        self.reset_btn.setToolTip("Clear image, prompt and result (Ctrl+R)")
        self.reset_btn.clicked.connect(self.reset_session)
        export_row.addWidget(self.reset_btn)
        result_layout.addLayout(export_row)

        layout.addWidget(result_group, 3)

        log_group = QGroupBox("Activity Log")
        log_layout = QVBoxLayout(log_group)
        self.log_text = QTextEdit()
        self.log_text.setReadOnly(True)
        log_layout.addWidget(self.log_text)
        layout.addWidget(log_group, 1)

        return panel

    def _setup_shortcuts(self):
        """Setup keyboard shortcuts."""
        self.generate_shortcut = QShortcut(QKeySequence("Ctrl+Return"), self)
        self.generate_shortcut.activated.connect(self.generate)

        self.open_file_shortcut = QShortcut(QKeySequence("Ctrl+O"), self)
        self.open_file_shortcut.activated.connect(self.select_file)

        self.download_shortcut = QShortcut(QKeySequence("Ctrl+S"), self)
        self.download_shortcut.activated.connect(self.download_result)

        self.reset_shortcut = QShortcut(QKeySequence("Ctrl+R"), self)
        self.reset_shortcut.activated.connect(self.reset_session)

    # ------------------------------------------------------------------
    # Logging / state display
    # ------------------------------------------------------------------

    def log(self, message: str, level: str = "info"):
        """Add a message to the log with timestamp and color."""
        timestamp = datetime.now().strftime("%H:%M:%S")

        colors = {
            "info": Theme.TEXT,
            "success": Theme.SUCCESS,
            "warning": Theme.WARNING,
            "error": Theme.ERROR,
            "debug": Theme.TEXT_DIM
        }
        color = colors.get(level, Theme.TEXT)

        html = f'<span style="color: {Theme.TEXT_DIM}">[{timestamp}]</span> <span style="color: {color}">{message}</span><br>'
        self.log_text.insertHtml(html)
        self.log_text.ensureCursorVisible()

    def _update_controls(self):
        """Enable or disable controls for the current session phase."""
        processing = self.session.is_processing
        has_image = self.session.input_image is not None
        result = self.session.result

        self.select_btn.setEnabled(not processing)
        self.remove_image_btn.setEnabled(has_image and not processing)
        self.prompt_input.setReadOnly(processing)
        self.remove_bg_btn.setEnabled(has_image and not processing)
        for btn in self.suggestion_buttons:
            btn.setEnabled(not processing)
        self.generate_btn.setEnabled(self.session.can_start())
        self.generate_btn.setText("Processing with Gemini..." if processing else "Generate")
        self.download_btn.setEnabled(bool(result and result.image_url) and not processing)

    def _on_session_event(self, event: SessionEvent):
        """React to session phase changes."""
        if event.phase is SessionPhase.PROCESSING:
            self.error_label.hide()
            self.result_text.hide()
            self.result_view.clear("Processing...")
            self.status_label.setText("Processing...")

        elif event.phase is SessionPhase.SUCCESS:
            result = self.session.result
            if result.image_url:
                self.result_view.set_image_data_url(result.image_url)
            else:
                self.result_view.clear("The model returned text only")
            if result.text:
                self.result_text.setText(result.text)
                self.result_text.show()
            self.status_label.setText("Complete!")
            self.log("Edit complete", "success")

        elif event.phase is SessionPhase.ERROR:
            self.error_label.setText(event.message)
            self.error_label.show()
            self.result_view.clear("Your edited image will appear here")
            self.status_label.setText("Failed")
            self.log(f"Edit failed: {event.message}", "error")

        else:
            self.error_label.hide()
            self.result_text.hide()
            self.result_view.clear("Your edited image will appear here")
            self.status_label.setText("Ready")

        self._update_controls()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def select_file(self):
        """Open file dialog to select an image file."""
        if self.session.is_processing:
            return
        start_dir = self.settings_manager.get_recent_input_folder()
        patterns = " ".join(f"*{ext}" for ext in SUPPORTED_IMAGE_EXTENSIONS)
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Select Image",
            start_dir,
            f"Images ({patterns});;All Files (*)"
        )
        if file_path:
            self.load_input_image(Path(file_path))

    def load_input_image(self, path: Path) -> bool:
        """Encode a file and make it the session's input image.

        Returns:
            True if the image was accepted
        """
        try:
            image = encode_file(path)
        except ValidationError as e:
            self.log(f"Rejected {path.name}: {e.message}", "error")
            QMessageBox.warning(self, "Invalid File", e.message)
            return False

        self.session.set_input_image(image)
        self.settings_manager.set_recent_input_folder(str(path.parent))
        self._show_input_preview(image.data_url)
        self.log(f"Loaded: {path.name}", "info")
        self._update_controls()
        return True

    def _show_input_preview(self, data_url: str):
        _, data = parse_data_url(data_url)
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            self.input_preview.setText("Preview not available")
            return
        self.input_preview.setPixmap(pixmap.scaled(
            max(self.input_preview.width() - 12, 200),
            INPUT_PREVIEW_HEIGHT - 12,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation
        ))

    def remove_input_image(self):
        if self.session.is_processing:
            return
        self.session.clear_input_image()
        self.input_preview.clear()
        self.input_preview.setText("Click 'Select Image' or drop an image here")
        self._update_controls()

    def _on_prompt_changed(self):
        text = self.prompt_input.toPlainText()
        self.session.set_prompt(text)
        self.char_count_label.setText(f"{len(text)} chars")
        self._update_controls()

    # ------------------------------------------------------------------
    # Edit
    # ------------------------------------------------------------------

    def generate(self):
        """Start an edit with the current prompt."""
        self._start_edit(None, quick_action=False)

    def remove_background(self):
        """Quick action: start an edit with the fixed background-removal prompt."""
        self._start_edit(REMOVE_BACKGROUND_PROMPT, quick_action=True)

    def _start_edit(self, prompt: str | None, quick_action: bool):
        try:
            thread = self.processing_controller.start_edit(prompt, quick_action=quick_action)
        except SessionBusyError as e:
            self.log(e.message, "warning")
            return

        if thread is None:
            return
        if quick_action and self.prompt_input.toPlainText() != self.session.prompt:
            self.prompt_input.blockSignals(True)
            self.prompt_input.setPlainText(self.session.prompt)
            self.prompt_input.blockSignals(False)
            self.char_count_label.setText(f"{len(self.session.prompt)} chars")

    def reset_session(self):
        """Clear everything; a pending response is discarded when it arrives."""
        self.session.reset()
        self.prompt_input.blockSignals(True)
        self.prompt_input.clear()
        self.prompt_input.blockSignals(False)
        self.char_count_label.setText("0 chars")
        self.input_preview.clear()
        self.input_preview.setText("Click 'Select Image' or drop an image here")
        self._update_controls()
        self.log("Session reset.", "info")

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def download_result(self):
        """Re-encode the result image in the chosen format and save it."""
        result = self.session.result
        if result is None or not result.image_url:
            return

        fmt = ExportFormat(self.format_combo.currentData())
        spec = EXPORT_FORMATS[fmt]
        start_dir = self.settings_manager.get_export_folder() or str(Path.home())
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Result",
            str(Path(start_dir) / export_filename(fmt)),
            f"{fmt.value.upper()} (*.{spec.extension})"
        )
        if not file_path:
            return

        try:
            data = render_export(result.image_url, fmt)
            Path(file_path).write_bytes(data)
        except (ExportError, OSError) as e:
            self.log(f"Download failed: {e}", "error")
            QMessageBox.warning(self, "Download Failed", str(e))
            return

        self.settings_manager.set_export_folder(str(Path(file_path).parent))
        self.log(f"Saved: {file_path}", "success")

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _edit_api_key(self):
        """Ask for a Gemini API key and rebuild the model client."""
        key, ok = QInputDialog.getText(
            self,
            "Gemini API Key",
            "Paste your Gemini API key:",
            QLineEdit.EchoMode.Password,
            self.config.api_key
        )
        if not ok:
            return
        try:
            save_api_key(key)
        except ValueError as e:
            self.log(f"Failed to save API key: {e}", "error")
            return

        self.config = self.config.model_copy(update={"api_key": key.strip()})
        self.processing_controller.set_client(create_image_model(self.config))
        self.log("API key saved.", "success")

    def closeEvent(self, event):
        """Handle window close event."""
        self.settings_manager.save_all(self)
        self.processing_controller.cleanup()
        event.accept()

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------

    def dragEnterEvent(self, event: QDragEnterEvent):
        """Handle drag enter event."""
        if event.mimeData().hasUrls() and not self.session.is_processing:
            event.acceptProposedAction()

    def dragMoveEvent(self, event):
        """Handle drag move event."""
        if event.mimeData().hasUrls() and not self.session.is_processing:
            event.acceptProposedAction()

    def dropEvent(self, event: QDropEvent):
        """Load the first dropped local file as the input image."""
        urls = event.mimeData().urls()
        paths = [Path(url.toLocalFile()) for url in urls if url.isLocalFile()]
        files = [p for p in paths if p.is_file()]
        if not files:
            return
        if len(files) > 1:
            self.log(f"Dropped {len(files)} files; using {files[0].name}", "warning")
        self.load_input_image(files[0])


def main():
    """Main entry point."""
    setup_logging()

    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    window = MainWindow()
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
