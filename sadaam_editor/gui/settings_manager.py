"""Settings persistence manager for the GUI."""

import logging
from pathlib import Path
from typing import Any

from PyQt6.QtCore import QSettings

from ..config import ExportFormat

logger = logging.getLogger(__name__)


# Default values for all settings
DEFAULT_SETTINGS = {
    "params/prompt": "",
    "export/format": ExportFormat.PNG.value,
    "export/folder": "",
    "recent/input_folder": "",
}


class SettingsManager:
    """Manages application settings persistence using QSettings.

    This class handles loading and saving of the last prompt, the chosen
    download format, window geometry, and recent folders.
    """

    SETTINGS_FILE = "gui_settings.ini"

    def __init__(self, settings_path: Path | str | None = None):
        """Initialize settings manager.

        Args:
            settings_path: INI file to use (defaults to one beside this module)
        """
        if settings_path is None:
            settings_path = Path(__file__).parent / self.SETTINGS_FILE
        self.settings = QSettings(str(settings_path), QSettings.Format.IniFormat)

    def load_window_geometry(self, window) -> None:
        """Load and apply window geometry and state.

        Args:
            window: Main window instance to apply geometry to
        """
        if self.settings.contains("window/geometry"):
            window.restoreGeometry(self.settings.value("window/geometry"))
        if self.settings.contains("window/state"):
            window.restoreState(self.settings.value("window/state"))

    def save_window_geometry(self, window) -> None:
        """Save window geometry and state."""
        self.settings.setValue("window/geometry", window.saveGeometry())
        self.settings.setValue("window/state", window.saveState())

    def get_export_format(self) -> ExportFormat:
        value = self.settings.value("export/format", DEFAULT_SETTINGS["export/format"])
        try:
            return ExportFormat(value)
        except ValueError:
            logger.warning(f"Unknown export format in settings: {value!r}")
            return ExportFormat.PNG

    def get_recent_input_folder(self) -> str:
        """Get most recent input folder (or empty string if none)."""
        return str(self.settings.value("recent/input_folder", ""))

    def set_recent_input_folder(self, path: str) -> None:
        self.save_single("recent/input_folder", path)

    def get_export_folder(self) -> str:
        return str(self.settings.value("export/folder", ""))

    def set_export_folder(self, path: str) -> None:
        self.save_single("export/folder", path)

    def load_params(self, window) -> None:
        """Load parameter settings into the window.

        Args:
            window: MainWindow instance with UI controls to populate
        """
        prompt = self.settings.value("params/prompt", DEFAULT_SETTINGS["params/prompt"])
        window.prompt_input.setPlainText(prompt)

        export_format = self.get_export_format()
        window.format_combo.setCurrentIndex(window.format_combo.findData(export_format.value))

    def save_params(self, window) -> None:
        """Save parameter settings from the window."""
        self.settings.setValue("params/prompt", window.prompt_input.toPlainText())
        self.settings.setValue("export/format", window.format_combo.currentData())

    def load_all(self, window) -> None:
        """Load all settings into the window."""
        self.load_window_geometry(window)
        self.load_params(window)

    def save_all(self, window) -> None:
        """Save all settings from the window."""
        self.save_window_geometry(window)
        self.save_params(window)
        self.settings.sync()

    def save_single(self, key: str, value: Any) -> None:
        """Save a single setting immediately.

        Args:
            key: Setting key
            value: Value to save
        """
        self.settings.setValue(key, value)
        self.settings.sync()  # Ensure written to disk
