"""Value objects - immutable, validated data types."""

from .config import EditorConfig
from .viewer import ViewerTransform, clamp_scale

__all__ = [
    'EditorConfig',
    'ViewerTransform',
    'clamp_scale',
]
