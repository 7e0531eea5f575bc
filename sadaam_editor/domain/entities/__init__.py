"""Domain entities."""

from .image import InputImage, EditResult

__all__ = ['InputImage', 'EditResult']
