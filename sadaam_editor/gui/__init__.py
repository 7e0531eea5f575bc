"""GUI components for Sadaam Editor."""

from .main_window import MainWindow, main
from .settings_manager import SettingsManager
from .zoomable_view import ZoomableImageView
from .processing_controller import ProcessingController, EditThread

__all__ = [
    'MainWindow',
    'main',
    'SettingsManager',
    'ZoomableImageView',
    'ProcessingController',
    'EditThread',
]
