"""Conversational brief editing on top of an assistant thread."""

import logging
import time
from typing import Callable, Optional

from ..config import config
from ..errors import (
    InputValidationError,
    ModelError,
    NoResponseError,
    ParseError,
    RunFailedError,
    RunTimeoutError,
    UGCBError,
)
from ..models import Brief, ChatTurn, apply_delta
from ..parsing import parse_json_object, summary_or_fallback
from ..services.assistant import AssistantClient, RunState, RunStatus

logger = logging.getLogger(__name__)

RUN_INSTRUCTIONS = """Please generate or update the brief based on the user's request. Format the output as a JSON object following this structure:
{
  "title": "Generated Brief Title String",
  "summaryOfChanges": "A brief summary describing the changes made in this response.",
  "scenes": [
    {
      "sceneNumber": 1,
      "sceneTitle": "Short scene title",
      "script": "Generated script for scene 1...",
      "tone": ["One or more of: %s"],
      "timeSeconds": 10,
      "visual": {"description": "Description of visuals for scene 1... (optional, null)"}
    }
  ]
}
Ensure the output is ONLY the JSON object, without any surrounding text or markdown formatting. Always return the complete list of scenes. The 'summaryOfChanges' field is mandatory and should concisely explain what was updated."""


class BriefChat:
    """One chat turn against the brief-editing assistant.

    The thread id is supplied by the caller and handed back unchanged; a new
    thread is created only when the caller has none.
    """

    def __init__(
        self,
        client: Optional[AssistantClient] = None,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the chat agent.

        Args:
            client: AssistantClient instance. Created if not provided.
            timeout: Seconds a run may stay pending. Defaults to config.run_timeout.
            poll_interval: Seconds between status checks. Defaults to config.poll_interval.
            clock: Monotonic time source.
            sleep: Sleep function used between polls.
        """
        self._client = client or AssistantClient()
        self._timeout = timeout if timeout is not None else config.run_timeout
        self._poll_interval = poll_interval if poll_interval is not None else config.poll_interval
        self._clock = clock
        self._sleep = sleep

    def run_turn(self, message: str, thread_id: Optional[str] = None) -> ChatTurn:
        """Send a user message and read back the assistant's brief update.

        Args:
            message: Free-text user message.
            thread_id: Thread handle from a previous turn, if any.

        Returns:
            ChatTurn with the text to display, the thread id and, when the
            reply contained a JSON object, that object as the brief delta.

        Raises:
            InputValidationError: If the message is empty.
            RunTimeoutError: If the run stays pending past the timeout.
            RunFailedError: If the run ends in a non-successful state.
            NoResponseError: If the run produced no assistant text.
            ModelError: If the assistant service cannot be reached.
        """
        if not message or not message.strip():
            raise InputValidationError("Message content is required")

        if not thread_id:
            thread_id = self._client.create_thread()
        else:
            logger.info(f"Using existing thread: {thread_id}")

        try:
            reply_text = self._complete_turn(thread_id, message)
        except UGCBError as e:
            e.thread_id = thread_id
            raise

        return self._to_turn(reply_text, thread_id)

    def _complete_turn(self, thread_id: str, message: str) -> str:
        """Post the message, run the assistant and return its reply text."""
        self._client.add_message(thread_id, message)

        instructions = RUN_INSTRUCTIONS % ", ".join(config.tone_vocabulary)
        run = self._client.create_run(thread_id, instructions=instructions)
        final = self._wait_for_run(thread_id, run)

        if final.status != RunStatus.COMPLETED:
            logger.error(f"Run {final.run_id} failed with status: {final.status.value}")
            detail = ": ".join(part for part in (final.error_code, final.error_message) if part)
            raise RunFailedError(detail or f"Assistant run failed with status: {final.status.value}")

        reply = self._client.latest_message(thread_id)
        if reply is None or reply.role != "assistant" or not reply.text:
            logger.error("No valid assistant text response found")
            raise NoResponseError("No valid assistant response found")
        return reply.text

    def _wait_for_run(self, thread_id: str, run: RunState) -> RunState:
        """Poll a run until it leaves the pending states or the deadline passes."""
        deadline = self._clock() + self._timeout
        state = run
        polls = 0

        while state.status.is_pending:
            if self._clock() >= deadline:
                logger.warning(f"Run {run.run_id} timed out after {self._timeout:.0f}s")
                try:
                    self._client.cancel_run(thread_id, run.run_id)
                except ModelError as e:
                    logger.error(f"Could not cancel timed out run {run.run_id}: {e}")
                raise RunTimeoutError("Assistant run timed out")

            self._sleep(self._poll_interval)
            polls += 1
            state = self._client.retrieve_run(thread_id, run.run_id)
            logger.debug(f"Run status (poll {polls}): {state.status.value}")

        return state

    @staticmethod
    def _to_turn(text: str, thread_id: str) -> ChatTurn:
        try:
            data = parse_json_object(text)
        except ParseError as e:
            logger.warning(f"Failed to parse JSON from assistant response: {e}")
            data = None

        if data is None:
            return ChatTurn(display_text=text, thread_id=thread_id, brief_delta=None)

        return ChatTurn(
            display_text=summary_or_fallback(data),
            thread_id=thread_id,
            brief_delta=data,
        )


def chat_turn(
    message: str,
    thread_id: Optional[str] = None,
    chat: Optional[BriefChat] = None,
) -> ChatTurn:
    """Run one chat turn with a default or given agent."""
    return (chat or BriefChat()).run_turn(message, thread_id)


class BriefConversation:
    """Working brief plus the thread it is being edited on.

    Starts without a thread; the first message opens one and every later
    message reuses it until :meth:`reset` is called.
    """

    def __init__(self, chat: Optional[BriefChat] = None, brief: Optional[Brief] = None) -> None:
        self._chat = chat or BriefChat()
        self.brief = brief or Brief()
        self.thread_id: Optional[str] = None

    @property
    def has_thread(self) -> bool:
        return self.thread_id is not None

    def send(self, message: str) -> ChatTurn:
        """Run a turn and merge any returned delta into the working brief."""
        if not self.has_thread and self.brief.scenes and message.strip():
            # A new thread has not seen the working brief yet
            message = f"Current brief:\n```json\n{self.brief.to_json()}\n```\n\n{message}"
        try:
            turn = self._chat.run_turn(message, self.thread_id)
        except UGCBError as e:
            if e.thread_id:
                self.thread_id = e.thread_id
            raise
        self.thread_id = turn.thread_id
        if turn.brief_delta is not None:
            self.brief = apply_delta(self.brief, turn.brief_delta)
        return turn

    def reset(self) -> None:
        """Forget the thread and start over with an empty brief."""
        self.thread_id = None
        self.brief = Brief()
