"""Processing controller for running model exchanges off the GUI thread."""

import logging
import traceback
from typing import Callable

from PyQt6.QtCore import QThread, pyqtSignal

from ..application.ports.image_model import ImageEditModel
from ..core.session import EditSession, EditTicket
from ..domain.entities.image import EditResult
from ..exceptions import ErrorKind, SadaamEditorError

logger = logging.getLogger(__name__)


class EditThread(QThread):
    """Thread running one request/response exchange with the model."""

    # Signals for thread-safe UI updates
    log_signal = pyqtSignal(str, str)  # message, level
    result_signal = pyqtSignal(int, object)  # generation, EditResult
    failure_signal = pyqtSignal(int, str, str)  # generation, message, ErrorKind value

    def __init__(self, client: ImageEditModel, ticket: EditTicket, debug_mode: bool = False):
        super().__init__()
        self.client = client
        self.ticket = ticket
        self.debug_mode = debug_mode

    def run(self) -> None:
        """Call the model and report the outcome."""
        image = self.ticket.image
        self.log_signal.emit(f"Sending {image.name} to {self.client.model_id}...", "info")

        try:
            result = self.client.edit(image.base64_data, image.mime_type, self.ticket.prompt)
        except SadaamEditorError as e:
            kind = e.kind or ErrorKind.TRANSPORT_FAILURE
            self.failure_signal.emit(self.ticket.generation, e.message, kind.value)
        except Exception as e:
            # Unexpected errors - report them rather than killing the thread silently
            error_msg = f"Unexpected error: {type(e).__name__}: {e}"
            logger.exception("Edit thread failed")
            if self.debug_mode:
                self.log_signal.emit(f"Traceback:\n{traceback.format_exc()}", "debug")
            self.failure_signal.emit(self.ticket.generation, error_msg, ErrorKind.TRANSPORT_FAILURE.value)
        else:
            self.result_signal.emit(self.ticket.generation, result)


class ProcessingController:
    """Controller connecting the edit session to background exchanges.

    Resolutions are applied on the GUI thread through Qt signals; the session
    drops any whose generation is no longer current (e.g. after a reset).
    """

    def __init__(self, session: EditSession, client: ImageEditModel):
        self.session = session
        self.client = client
        self._threads: list[EditThread] = []
        self._log_callbacks: list[Callable[[str, str], None]] = []

    def set_client(self, client: ImageEditModel) -> None:
        """Swap the model client (e.g. after the API key changed)."""
        self.client = client

    def add_log_callback(self, callback: Callable[[str, str], None]) -> None:
        self._log_callbacks.append(callback)

    def start_edit(self, prompt: str | None = None, quick_action: bool = False) -> EditThread | None:
        """Start an edit in the background.

        Args:
            prompt: Prompt override (the session prompt if None)
            quick_action: Treat ``prompt`` as a fixed instruction that also
                overwrites the visible prompt

        Returns:
            The started thread, or None if the session did not start an edit

        Raises:
            SessionBusyError: If an edit is already in flight
        """
        if quick_action and prompt is not None:
            ticket = self.session.quick_action(prompt)
        else:
            ticket = self.session.start_edit(prompt)
        if ticket is None:
            return None

        thread = EditThread(self.client, ticket)
        thread.log_signal.connect(self._emit_log)
        thread.result_signal.connect(self._on_result)
        thread.failure_signal.connect(self._on_failure)
        thread.finished.connect(lambda: self._forget(thread))
        thread.finished.connect(thread.deleteLater)
        self._threads.append(thread)
        thread.start()
        return thread

    def _on_result(self, generation: int, result: EditResult) -> None:
        if not self.session.apply_result(generation, result):
            self._emit_log(f"Discarded stale result for edit #{generation}", "debug")

    def _on_failure(self, generation: int, message: str, kind: str) -> None:
        if not self.session.apply_failure(generation, message, ErrorKind(kind)):
            self._emit_log(f"Discarded stale failure for edit #{generation}", "debug")

    def _emit_log(self, message: str, level: str) -> None:
        for callback in self._log_callbacks:
            callback(message, level)

    def _forget(self, thread: EditThread) -> None:
        # run() has returned; let the OS thread exit before the last reference goes
        thread.wait()
        if thread in self._threads:
            self._threads.remove(thread)

    def cleanup(self, timeout_ms: int = 2000) -> None:
        """Wait briefly for in-flight exchanges; they cannot be cancelled."""
        for thread in list(self._threads):
            if thread.isRunning():
                thread.wait(timeout_ms)
