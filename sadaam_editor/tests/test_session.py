"""Tests for the edit session state machine."""

import base64
import io
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from PIL import Image

from ..adapters.models.gemini_adapter import GeminiImageClient
from ..application.ports.event_publisher import SimpleEventPublisher
from ..config import EMPTY_RESULT_MESSAGE, MISSING_CREDENTIAL_MESSAGE, REMOVE_BACKGROUND_PROMPT
from ..core.encoder import encode_bytes, make_data_url
from ..core.exporter import export_filename, render_export
from ..core.session import EditSession, SessionPhase
from ..domain.entities.image import EditResult
from ..exceptions import ErrorKind, SessionBusyError, TransportError


def _png_bytes(size=(2, 2), color=(0, 128, 255, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _png_data_url(size=(2, 2)) -> str:
    return make_data_url("image/png", base64.b64encode(_png_bytes(size)).decode("ascii"))


@pytest.fixture
def session():
    session = EditSession()
    session.set_input_image(encode_bytes(_png_bytes(), "image/png"))
    return session


class TestStartEdit:
    """Test starting edits."""

    def test_blank_prompt_does_nothing(self, session):
        session.set_prompt("   ")
        client = Mock()

        assert session.start_edit() is None
        assert session.submit(client) is SessionPhase.IDLE
        client.edit.assert_not_called()

    def test_missing_image_does_nothing(self):
        session = EditSession()
        session.set_prompt("Add sunglasses")
        assert session.start_edit() is None
        assert session.phase is SessionPhase.IDLE

    def test_start_moves_to_processing(self, session):
        session.set_prompt("Add sunglasses")
        ticket = session.start_edit()

        assert ticket is not None
        assert ticket.prompt == "Add sunglasses"
        assert ticket.image is session.input_image
        assert ticket.generation == session.generation
        assert session.phase is SessionPhase.PROCESSING
        assert session.is_processing

    def test_start_clears_previous_outcome(self, session):
        session.set_prompt("Add sunglasses")
        ticket = session.start_edit()
        session.apply_failure(ticket.generation, "boom")
        assert session.error_message == "boom"

        session.start_edit()
        assert session.error_message is None
        assert session.result is None

    def test_busy_rejects_second_edit(self, session):
        session.set_prompt("Add sunglasses")
        session.start_edit()

        with pytest.raises(SessionBusyError):
            session.start_edit()
        with pytest.raises(SessionBusyError):
            session.quick_action(REMOVE_BACKGROUND_PROMPT)

    def test_can_start(self, session):
        assert not session.can_start()
        session.set_prompt("Make it snowy")
        assert session.can_start()
        session.start_edit()
        assert not session.can_start()


class TestQuickAction:
    """Test the fixed-instruction shortcut."""

    def test_overwrites_prompt(self, session):
        session.set_prompt("something else")
        ticket = session.quick_action(REMOVE_BACKGROUND_PROMPT)

        assert ticket.prompt == "Remove the background"
        assert session.prompt == "Remove the background"
        assert session.phase is SessionPhase.PROCESSING

    def test_requires_image(self):
        session = EditSession()
        assert session.quick_action(REMOVE_BACKGROUND_PROMPT) is None
        assert session.prompt == ""


class TestResolution:
    """Test applying results and failures."""

    def test_text_only_result_is_success(self, session):
        session.set_prompt("Describe the image")
        ticket = session.start_edit()

        assert session.apply_result(ticket.generation, EditResult(text="hi"))
        assert session.phase is SessionPhase.SUCCESS
        assert session.result.image_url is None
        assert session.result.text == "hi"

    def test_empty_result_is_error(self, session):
        session.set_prompt("Add sunglasses")
        ticket = session.start_edit()

        session.apply_result(ticket.generation, EditResult())

        assert session.phase is SessionPhase.ERROR
        assert session.error_message == EMPTY_RESULT_MESSAGE
        assert session.error_kind is ErrorKind.EMPTY_RESULT
        assert session.result is None

    def test_failure_message_is_verbatim(self, session):
        session.set_prompt("Add sunglasses")
        ticket = session.start_edit()

        session.apply_failure(ticket.generation, "quota exceeded")
        assert session.phase is SessionPhase.ERROR
        assert session.error_message == "quota exceeded"
        assert session.error_kind is ErrorKind.TRANSPORT_FAILURE

    def test_stale_result_after_reset_is_dropped(self, session):
        session.set_prompt("Add sunglasses")
        ticket = session.start_edit()
        session.reset()

        assert not session.apply_result(ticket.generation, EditResult(image_url=_png_data_url()))
        assert session.phase is SessionPhase.IDLE
        assert session.result is None
        assert session.input_image is None
        assert session.prompt == ""

    def test_stale_failure_after_new_edit_is_dropped(self, session):
        session.set_prompt("Add sunglasses")
        first = session.start_edit()
        session.apply_result(first.generation, EditResult(text="ok"))
        second = session.start_edit()

        assert not session.apply_failure(first.generation, "late")
        assert session.phase is SessionPhase.PROCESSING
        assert session.apply_result(second.generation, EditResult(text="done"))
        assert session.result.text == "done"

    def test_events_published(self):
        publisher = SimpleEventPublisher()
        events = []
        publisher.subscribe(events.append)
        session = EditSession(publisher)
        session.set_input_image(encode_bytes(_png_bytes(), "image/png"))
        session.set_prompt("Add sunglasses")

        ticket = session.start_edit()
        session.apply_failure(ticket.generation, "nope")

        assert [e.phase for e in events] == [SessionPhase.PROCESSING, SessionPhase.ERROR]
        assert events[-1].message == "nope"
        assert events[-1].generation == ticket.generation


class TestSubmit:
    """Test the synchronous exchange."""

    def test_success_with_image(self, session):
        client = Mock()
        client.edit.return_value = EditResult(image_url=_png_data_url(), text="Here you go")
        session.set_prompt("Add sunglasses")

        assert session.submit(client) is SessionPhase.SUCCESS
        image = session.input_image
        client.edit.assert_called_once_with(image.base64_data, "image/png", "Add sunglasses")

    def test_transport_error(self, session):
        client = Mock()
        client.edit.side_effect = TransportError("connection reset")
        session.set_prompt("Add sunglasses")

        assert session.submit(client) is SessionPhase.ERROR
        assert session.error_message == "connection reset"

    def test_unexpected_error_is_recoverable(self, session):
        client = Mock()
        client.edit.side_effect = RuntimeError("boom")
        session.set_prompt("Add sunglasses")

        assert session.submit(client) is SessionPhase.ERROR
        assert session.error_message == "Unexpected error: RuntimeError: boom"
        assert session.error_kind is ErrorKind.TRANSPORT_FAILURE

        # Not stuck in PROCESSING: the next edit can start
        client.edit.side_effect = None
        client.edit.return_value = EditResult(text="ok")
        assert session.submit(client, "again") is SessionPhase.SUCCESS

    def test_missing_credential_makes_no_request(self, session):
        genai_client = Mock()
        client = GeminiImageClient(api_key="", client=genai_client)
        session.set_prompt("Make it snowy")

        assert session.submit(client) is SessionPhase.ERROR
        assert session.error_message == MISSING_CREDENTIAL_MESSAGE
        assert session.error_kind is ErrorKind.MISSING_CREDENTIAL
        genai_client.models.generate_content.assert_not_called()

    def test_jpeg_image_part_without_text(self, session):
        jpeg = io.BytesIO()
        Image.new("RGB", (2, 2), (0, 0, 0)).save(jpeg, format="JPEG")
        part = SimpleNamespace(
            inline_data=SimpleNamespace(data=jpeg.getvalue(), mime_type="image/jpeg"),
            text=None
        )
        genai_client = Mock()
        genai_client.models.generate_content.return_value = SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))]
        )
        client = GeminiImageClient(api_key="key", client=genai_client)
        session.set_prompt("Add sunglasses")

        assert session.submit(client) is SessionPhase.SUCCESS
        assert session.result.image_url.startswith("data:image/jpeg;base64,")
        assert session.result.text is None
        genai_client.models.generate_content.assert_called_once()

    def test_add_sunglasses_then_download_jpg(self, session):
        client = Mock()
        client.edit.return_value = EditResult(image_url=_png_data_url((4, 4)))
        session.set_prompt("Add sunglasses")

        assert session.submit(client) is SessionPhase.SUCCESS

        data = render_export(session.result.image_url, "jpg")
        exported = Image.open(io.BytesIO(data))
        assert exported.format == "JPEG"
        assert exported.size == (4, 4)
        assert export_filename("jpg") == "sadaam-edit.jpg"
