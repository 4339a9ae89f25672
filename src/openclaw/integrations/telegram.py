"""
Telegram bot integration: long-polls ``getUpdates`` and answers each text message with the agent.

At most one polling worker runs per :class:`TelegramPoller`.  Starting with a different token stops
the previous worker first; starting with the token already polling is a no-op.
"""

import logging
import threading
from enum import Enum
from typing import (
    Any,
    Dict,
    List,
    Optional,
)

import httpx

from openclaw.agent.runtime import AgentRuntime
from openclaw.core.events import CollectingSink
from openclaw.core.schema import Message

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"
MAX_MESSAGE_LENGTH = 4096
MAX_HISTORY = 50

EMPTY_REPLY = "I received your message but couldn't generate a response."
LOOP_FAILED_REPLY = "Sorry, I encountered an error processing your request."
HANDLER_FAILED_REPLY = "Sorry, I encountered an error processing your message."


class TelegramError(RuntimeError):
    """Raised for Telegram API failures and invalid poller use."""


class PollerState(str, Enum):
    """Lifecycle of the polling worker."""

    STOPPED = "stopped"
    STARTING = "starting"
    POLLING = "polling"
    STOPPING = "stopping"


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """Cut *text* into chunks Telegram accepts."""
    if len(text) <= limit:
        return [text]
    return [text[i : i + limit] for i in range(0, len(text), limit)]


class TelegramPoller:
    """Background worker bridging a Telegram bot to the agent runtime."""

    def __init__(
        self,
        runtime: AgentRuntime,
        transport: Optional[httpx.BaseTransport] = None,
        poll_timeout: int = 30,
        conflict_delay: float = 5.0,
        initial_backoff: float = 1.0,
        max_backoff: float = 60.0,
        stop_timeout: Optional[float] = None,
    ) -> None:
        self.runtime = runtime
        self._transport = transport
        self.poll_timeout = poll_timeout
        self.conflict_delay = conflict_delay
        self.initial_backoff = initial_backoff
        self.max_backoff = max_backoff
        self.stop_timeout = stop_timeout if stop_timeout is not None else poll_timeout + 5.0

        self._lock = threading.Lock()
        self._state = PollerState.STOPPED
        self._token: Optional[str] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._offset = 0
        self._histories: Dict[int, List[Message]] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def state(self) -> PollerState:
        """Current lifecycle state; STOPPING lasts until the worker has actually exited."""
        if self._state == PollerState.STOPPING and not self._worker_alive():
            return PollerState.STOPPED
        return self._state

    @property
    def running(self) -> bool:
        """True while a worker is starting or polling."""
        return self._state in (PollerState.STARTING, PollerState.POLLING)

    def start(self, token: str) -> bool:
        """
        Start polling with *token*.

        Returns *False* when that token is already being polled, *True* when a new worker started.

        Raises
        ------
        TelegramError
            If *token* is empty.
        """
        if not token:
            raise TelegramError("A Telegram bot token is required")

        with self._lock:
            if self.running and self._token == token:
                logger.info("Telegram polling already running with the same token, skipping")
                return False
            if self.running:
                logger.info("Telegram polling already running, stopping previous instance")
                self._stop_locked()
            if self._worker_alive() and self._thread is not threading.current_thread():
                logger.info("Waiting for the previous Telegram worker to exit")
                self._thread.join()
            self._reap_locked()

            self._set_state(PollerState.STARTING)
            self._token = token
            self._offset = 0
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._poll_loop,
                args=(token, self._stop_event),
                name="telegram-poller",
                daemon=True,
            )
            self._thread.start()
            return True

    def stop(self) -> None:
        """
        Stop the worker, waiting up to ``stop_timeout`` seconds for it to exit.

        A worker still busy after that stays in STOPPING; the next :meth:`start` joins it before
        launching a replacement.
        """
        with self._lock:
            self._stop_locked()

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the worker exits or *timeout* seconds pass."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def _worker_alive(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def _stop_locked(self) -> None:
        if self.state == PollerState.STOPPED:
            self._reap_locked()
            return
        self._set_state(PollerState.STOPPING)
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.stop_timeout)
            if thread.is_alive():
                logger.warning(
                    "Telegram worker did not exit within %.1fs, still stopping", self.stop_timeout
                )
                return
        self._reap_locked()

    def _reap_locked(self) -> None:
        if self._worker_alive() and self._thread is not threading.current_thread():
            return
        self._thread = None
        self._token = None
        self._set_state(PollerState.STOPPED)

    def _set_state(self, state: PollerState) -> None:
        if state != self._state:
            logger.info("Telegram poller: %s -> %s", self._state.value, state.value)
        self._state = state

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------
    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=TELEGRAM_API, timeout=self.poll_timeout + 10, transport=self._transport
        )

    def _poll_loop(self, token: str, stop_event: threading.Event) -> None:
        backoff = self.initial_backoff
        with self._client() as client:
            if self._stop_event is stop_event and not stop_event.is_set():
                self._set_state(PollerState.POLLING)

            while not stop_event.is_set():
                try:
                    response = client.get(
                        f"/bot{token}/getUpdates",
                        params={"offset": self._offset + 1, "timeout": self.poll_timeout},
                    )
                    data = response.json() if response.content else {}
                except (httpx.HTTPError, ValueError) as exc:
                    if stop_event.is_set():
                        break
                    logger.error("Telegram poll error: %s", exc)
                    stop_event.wait(backoff)
                    backoff = min(backoff * 2, self.max_backoff)
                    continue

                if response.status_code == 409 or "Conflict" in str(data.get("description", "")):
                    logger.warning("Telegram conflict: another instance is polling, waiting")
                    stop_event.wait(self.conflict_delay)
                    backoff = self.initial_backoff
                    continue
                if response.is_error or not data.get("ok"):
                    logger.error(
                        "Telegram API error (%s): %s", response.status_code, response.text
                    )
                    stop_event.wait(backoff)
                    backoff = min(backoff * 2, self.max_backoff)
                    continue

                backoff = self.initial_backoff
                for update in data.get("result", []):
                    if stop_event.is_set():
                        break
                    self._offset = max(self._offset, int(update.get("update_id", 0)))
                    self._dispatch(client, token, update)

        logger.info("Telegram poll loop exited")

    def _dispatch(self, client: httpx.Client, token: str, update: Dict[str, Any]) -> None:
        message = update.get("message") or {}
        text = (message.get("text") or "").strip()
        if not text:
            return
        chat_id = message["chat"]["id"]
        try:
            reply = self.handle_message(chat_id, text)
            self.send_message(client, token, chat_id, reply)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Error handling Telegram message from chat %s", chat_id)
            try:
                self.send_message(client, token, chat_id, HANDLER_FAILED_REPLY)
            except TelegramError as exc:
                logger.error("Error sending Telegram error message: %s", exc)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def history(self, chat_id: int) -> List[Message]:
        """Conversation kept for *chat_id*."""
        return list(self._histories.get(chat_id, []))

    def handle_message(self, chat_id: int, text: str) -> str:
        """Run the agent over the chat's history plus *text* and return the reply to send."""
        logger.info("Telegram message from chat %s: %s", chat_id, text)
        history = self._histories.setdefault(chat_id, [])
        history.append(Message.user(text))
        del history[:-MAX_HISTORY]

        sink = CollectingSink()
        state = self.runtime.respond(history, sink)
        reply = sink.text.strip()
        if reply:
            history.append(Message.assistant(reply))
            del history[:-MAX_HISTORY]
            return reply
        if state.error:
            logger.error("Agent loop error for chat %s: %s", chat_id, state.error)
            return LOOP_FAILED_REPLY
        return EMPTY_REPLY

    def send_message(self, client: httpx.Client, token: str, chat_id: int, text: str) -> None:
        """Send *text* to *chat_id*, split into Telegram-sized chunks."""
        for chunk in split_message(text):
            try:
                response = client.post(
                    f"/bot{token}/sendMessage", json={"chat_id": chat_id, "text": chunk}
                )
            except httpx.HTTPError as exc:
                raise TelegramError(f"Telegram request failed: {exc}") from exc
            if response.is_error:
                raise TelegramError(
                    f"Telegram API error ({response.status_code}): {response.text}"
                )
