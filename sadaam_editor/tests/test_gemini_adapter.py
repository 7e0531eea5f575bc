"""Tests for the Gemini model adapter."""

import base64
from types import SimpleNamespace
from unittest.mock import Mock

import httpx
import pytest
from google.genai import errors

from ..adapters.models import create_image_model
from ..adapters.models.gemini_adapter import GeminiImageClient, extract_edit_result
from ..application.ports.image_model import ImageEditModel
from ..domain.value_objects.config import EditorConfig
from ..exceptions import ErrorKind, MissingCredentialError, TransportError

IMAGE_B64 = base64.b64encode(b"\x89PNG fake").decode("ascii")


def _image_part(data, mime_type="image/png"):
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)


def _text_part(text):
    return SimpleNamespace(inline_data=None, text=text)


def _response(parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


class TestExtractEditResult:
    """Test picking image and text out of response parts."""

    def test_image_and_text(self):
        result = extract_edit_result([_text_part("Here it is"), _image_part(b"abc")])
        assert result.image_url == "data:image/png;base64,YWJj"
        assert result.text == "Here it is"

    def test_later_parts_win(self):
        result = extract_edit_result([
            _image_part(b"first", "image/jpeg"),
            _text_part("one"),
            _image_part(b"second", "image/webp"),
            _text_part("two"),
        ])
        assert result.image_url == "data:image/webp;base64," + base64.b64encode(b"second").decode()
        assert result.text == "two"

    def test_missing_mime_type_defaults_to_png(self):
        result = extract_edit_result([_image_part(b"abc", mime_type=None)])
        assert result.image_url.startswith("data:image/png;base64,")

    def test_empty_parts(self):
        assert not extract_edit_result([]).has_output
        assert not extract_edit_result(None).has_output

    def test_empty_text_ignored(self):
        result = extract_edit_result([_text_part("kept"), _text_part("")])
        assert result.text == "kept"


class TestGeminiImageClient:
    """Test the request/response exchange."""

    def test_implements_port(self):
        assert isinstance(GeminiImageClient(api_key="key"), ImageEditModel)

    def test_sends_image_then_prompt(self):
        genai_client = Mock()
        genai_client.models.generate_content.return_value = _response([_image_part(b"out")])
        client = GeminiImageClient(api_key="key", model_id="test-model", client=genai_client)

        result = client.edit(IMAGE_B64, "image/png", "Add sunglasses")

        assert result.image_url == "data:image/png;base64," + base64.b64encode(b"out").decode()
        kwargs = genai_client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "test-model"
        parts = kwargs["contents"][0].parts
        assert parts[0].inline_data.data == b"\x89PNG fake"
        assert parts[0].inline_data.mime_type == "image/png"
        assert parts[1].text == "Add sunglasses"

    def test_no_candidates(self):
        genai_client = Mock()
        genai_client.models.generate_content.return_value = SimpleNamespace(candidates=[])
        client = GeminiImageClient(api_key="key", client=genai_client)

        assert not client.edit(IMAGE_B64, "image/png", "x").has_output

    @pytest.mark.parametrize("api_key", ["", "   ", None])
    def test_missing_credential(self, api_key):
        genai_client = Mock()
        client = GeminiImageClient(api_key=api_key, client=genai_client)

        with pytest.raises(MissingCredentialError) as exc_info:
            client.edit(IMAGE_B64, "image/png", "x")

        assert exc_info.value.message == "API key is missing."
        assert exc_info.value.kind is ErrorKind.MISSING_CREDENTIAL
        genai_client.models.generate_content.assert_not_called()

    def test_api_error_becomes_transport_error(self):
        genai_client = Mock()
        genai_client.models.generate_content.side_effect = errors.ClientError(
            400, {"error": {"code": 400, "message": "Image too large", "status": "INVALID_ARGUMENT"}}
        )
        client = GeminiImageClient(api_key="key", model_id="test-model", client=genai_client)

        with pytest.raises(TransportError) as exc_info:
            client.edit(IMAGE_B64, "image/png", "x")

        assert "Image too large" in exc_info.value.message
        assert exc_info.value.model_id == "test-model"

    def test_network_error_becomes_transport_error(self):
        genai_client = Mock()
        genai_client.models.generate_content.side_effect = httpx.ConnectError("connection refused")
        client = GeminiImageClient(api_key="key", client=genai_client)

        with pytest.raises(TransportError) as exc_info:
            client.edit(IMAGE_B64, "image/png", "x")
        assert exc_info.value.message == "connection refused"

    def test_invalid_base64_becomes_transport_error(self):
        genai_client = Mock()
        client = GeminiImageClient(api_key="key", client=genai_client)

        with pytest.raises(TransportError):
            client.edit("not base64!", "image/png", "x")
        genai_client.models.generate_content.assert_not_called()


class TestCreateImageModel:
    """Test building the client from config."""

    def test_uses_config(self):
        config = EditorConfig(api_key=" key ", model_id="custom-model")
        client = create_image_model(config)

        assert client.model_id == "custom-model"
        assert client.api_key == "key"
        assert client.has_credential
