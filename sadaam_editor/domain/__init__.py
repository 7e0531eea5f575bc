"""Domain layer - plain data types with no GUI or network dependencies."""

from .entities.image import InputImage, EditResult
from .value_objects.config import EditorConfig
from .value_objects.viewer import ViewerTransform, MIN_SCALE, MAX_SCALE

__all__ = [
    # Entities
    'InputImage',
    'EditResult',
    # Value Objects
    'EditorConfig',
    'ViewerTransform',
    'MIN_SCALE',
    'MAX_SCALE',
]
