"""Edit session state machine.

The session owns the input image, the prompt and the outcome of the latest
edit. It moves through four phases::

    IDLE/SUCCESS/ERROR --start_edit--> PROCESSING
    PROCESSING --apply_result--> SUCCESS (or ERROR if the result is empty)
    PROCESSING --apply_failure--> ERROR
    any --reset--> IDLE

Each started edit gets a generation number. Resolutions carrying an older
generation are dropped, so a reset while a request is in flight cannot be
overwritten by the late response.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..application.ports.event_publisher import EventPublisher, SessionEvent, SimpleEventPublisher
from ..application.ports.image_model import ImageEditModel
from ..config import EMPTY_RESULT_MESSAGE
from ..domain.entities.image import EditResult, InputImage
from ..exceptions import ErrorKind, SadaamEditorError, SessionBusyError

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    """Phases of an edit session."""
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


_STARTABLE_PHASES = frozenset({SessionPhase.IDLE, SessionPhase.SUCCESS, SessionPhase.ERROR})


@dataclass(frozen=True, slots=True)
class EditTicket:
    """Everything the caller needs to run the exchange for a started edit."""
    generation: int
    image: InputImage
    prompt: str


class EditSession:
    """State machine behind the editor UI."""

    def __init__(self, publisher: EventPublisher | None = None):
        self.publisher = publisher or SimpleEventPublisher()
        self.phase = SessionPhase.IDLE
        self.input_image: InputImage | None = None
        self.prompt = ""
        self.result: EditResult | None = None
        self.error_message: str | None = None
        self.error_kind: ErrorKind | None = None
        self.generation = 0

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_input_image(self, image: InputImage) -> None:
        """Replace the input image wholesale."""
        self.input_image = image
        logger.debug(f"Input image set: {image.name} ({image.mime_type})")

    def clear_input_image(self) -> None:
        self.input_image = None

    def set_prompt(self, text: str) -> None:
        self.prompt = text

    @property
    def is_processing(self) -> bool:
        return self.phase is SessionPhase.PROCESSING

    def can_start(self, prompt: str | None = None) -> bool:
        """Check whether an edit could start now.

        Args:
            prompt: Prompt to check (defaults to the session prompt)
        """
        text = self.prompt if prompt is None else prompt
        return (
            self.phase in _STARTABLE_PHASES
            and self.input_image is not None
            and bool(text.strip())
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_edit(self, prompt: str | None = None) -> EditTicket | None:
        """Move to PROCESSING for a new edit.

        Args:
            prompt: Prompt override (defaults to the session prompt)

        Returns:
            Ticket for the exchange, or None when there is no image or the
            prompt is blank (the phase is left unchanged)

        Raises:
            SessionBusyError: If an edit is already in flight
        """
        if self.is_processing:
            raise SessionBusyError("An edit is already in progress")

        text = self.prompt if prompt is None else prompt
        if self.input_image is None or not text.strip():
            logger.debug("Edit not started: missing image or blank prompt")
            return None

        self.generation += 1
        self.result = None
        self.error_message = None
        self.error_kind = None
        self._set_phase(SessionPhase.PROCESSING)
        logger.info(f"Edit #{self.generation} started: {text!r}")
        return EditTicket(generation=self.generation, image=self.input_image, prompt=text)

    def quick_action(self, prompt: str) -> EditTicket | None:
        """Start an edit with a fixed instruction, overwriting the visible prompt."""
        if self.is_processing:
            raise SessionBusyError("An edit is already in progress")
        if self.input_image is None or not prompt.strip():
            return None
        self.prompt = prompt
        return self.start_edit(prompt)

    def apply_result(self, generation: int, result: EditResult) -> bool:
        """Record the outcome of an exchange.

        Returns:
            False if the resolution is stale and was ignored
        """
        if not self._is_current(generation):
            return False

        if not result.has_output:
            self._fail(EMPTY_RESULT_MESSAGE, ErrorKind.EMPTY_RESULT)
            return True

        self.result = result
        self._set_phase(SessionPhase.SUCCESS)
        logger.info(
            f"Edit #{generation} succeeded "
            f"(image: {result.has_image}, text: {result.has_text})"
        )
        return True

    def apply_failure(
        self,
        generation: int,
        message: str,
        kind: ErrorKind = ErrorKind.TRANSPORT_FAILURE
    ) -> bool:
        """Record a failed exchange; the message is stored verbatim.

        Returns:
            False if the resolution is stale and was ignored
        """
        if not self._is_current(generation):
            return False
        self._fail(message, kind)
        return True

    def reset(self) -> None:
        """Return to IDLE and forget image, prompt, result and error."""
        self.generation += 1
        self.input_image = None
        self.prompt = ""
        self.result = None
        self.error_message = None
        self.error_kind = None
        self._set_phase(SessionPhase.IDLE)
        logger.debug("Session reset")

    def submit(self, client: ImageEditModel, prompt: str | None = None) -> SessionPhase:
        """Start an edit and run the exchange synchronously.

        Args:
            client: Model client to call
            prompt: Prompt override (defaults to the session prompt)

        Returns:
            The phase after the exchange (unchanged if the edit did not start)
        """
        ticket = self.start_edit(prompt)
        if ticket is None:
            return self.phase

        try:
            result = client.edit(ticket.image.base64_data, ticket.image.mime_type, ticket.prompt)
        except SadaamEditorError as e:
            self.apply_failure(ticket.generation, e.message, e.kind or ErrorKind.TRANSPORT_FAILURE)
        except Exception as e:
            logger.exception(f"Edit #{ticket.generation} raised unexpectedly")
            self.apply_failure(ticket.generation, f"Unexpected error: {type(e).__name__}: {e}")
        else:
            self.apply_result(ticket.generation, result)
        return self.phase

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        if generation != self.generation or not self.is_processing:
            logger.debug(
                f"Ignoring stale resolution for edit #{generation} "
                f"(current: #{self.generation}, phase: {self.phase.value})"
            )
            return False
        return True

    def _fail(self, message: str, kind: ErrorKind) -> None:
        self.result = None
        self.error_message = message
        self.error_kind = kind
        self._set_phase(SessionPhase.ERROR, message)
        logger.warning(f"Edit #{self.generation} failed: {message}")

    def _set_phase(self, phase: SessionPhase, message: str = "") -> None:
        self.phase = phase
        self.publisher.publish(SessionEvent(phase=phase, message=message, generation=self.generation))
