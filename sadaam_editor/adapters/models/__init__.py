"""Model adapters - implementations of ImageEditModel."""

from ...domain.value_objects.config import EditorConfig
from .gemini_adapter import GeminiImageClient, extract_edit_result


def create_image_model(config: EditorConfig) -> GeminiImageClient:
    """Create the model client described by an editor config."""
    return GeminiImageClient(api_key=config.api_key, model_id=config.model_id)


__all__ = [
    'GeminiImageClient',
    'create_image_model',
    'extract_edit_result',
]
