"""Ports - interfaces for external dependencies (Dependency Inversion)."""

from .image_model import ImageEditModel
from .event_publisher import EventPublisher, SessionEvent, SimpleEventPublisher

__all__ = [
    'ImageEditModel',
    'EventPublisher',
    'SessionEvent',
    'SimpleEventPublisher',
]
