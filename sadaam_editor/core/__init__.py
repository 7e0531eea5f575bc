"""Core editing pipeline: encoding, session state, viewing and export."""

from .encoder import encode_bytes, encode_file, make_data_url, parse_data_url
from .exporter import export_filename, render_export, save_export
from .session import EditSession, EditTicket, SessionPhase
from .viewer import ViewerState

__all__ = [
    # Encoder
    'encode_bytes',
    'encode_file',
    'make_data_url',
    'parse_data_url',
    # Session
    'EditSession',
    'EditTicket',
    'SessionPhase',
    # Viewer/Exporter
    'ViewerState',
    'export_filename',
    'render_export',
    'save_export',
]
