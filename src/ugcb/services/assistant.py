"""OpenAI assistant thread client wrapper."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from openai import OpenAI, OpenAIError

from ..config import config
from ..errors import ModelError

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    """Status of an assistant run."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"

    @property
    def is_pending(self) -> bool:
        return self in (RunStatus.QUEUED, RunStatus.IN_PROGRESS)


@dataclass
class RunState:
    """Snapshot of an assistant run."""

    run_id: str
    status: RunStatus
    error_code: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class ThreadMessage:
    """The text of a thread message, if it has any."""

    role: str
    text: Optional[str] = None


class AssistantClient:
    """Client wrapper for OpenAI assistant threads.

    Exposes the five thread operations one chat turn needs. Thread ids are
    passed through untouched.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        assistant_id: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ) -> None:
        """Initialize the assistant client.

        Args:
            api_key: OpenAI API key. Defaults to OPENAI_API_KEY env var.
            assistant_id: Assistant to run. Defaults to UGCB_ASSISTANT_ID env var.
            client: Preconfigured SDK client, mainly for tests.
        """
        self._assistant_id = assistant_id or config.assistant_id
        if not self._assistant_id:
            raise ValueError("Assistant ID not provided. Set UGCB_ASSISTANT_ID env var.")

        if client is not None:
            self._client = client
            return

        api_key = api_key or config.openai_api_key
        if not api_key:
            raise ValueError("OpenAI API key not provided. Set OPENAI_API_KEY env var.")
        self._client = OpenAI(api_key=api_key, max_retries=0)

    @property
    def assistant_id(self) -> str:
        return self._assistant_id

    def create_thread(self) -> str:
        """Create a new thread and return its id."""
        try:
            thread = self._client.beta.threads.create()
        except OpenAIError as e:
            logger.error(f"Failed to create thread: {e}")
            raise ModelError(f"Could not start an assistant thread: {e}") from e
        logger.info(f"Created new thread: {thread.id}")
        return thread.id

    def add_message(self, thread_id: str, content: str) -> None:
        """Append a user message to a thread."""
        try:
            self._client.beta.threads.messages.create(
                thread_id, role="user", content=content
            )
        except OpenAIError as e:
            logger.error(f"Failed to add message to thread {thread_id}: {e}")
            raise ModelError(f"Could not send the message to the assistant: {e}") from e

    def create_run(self, thread_id: str, instructions: Optional[str] = None) -> RunState:
        """Start a run of the assistant on a thread."""
        kwargs = {"thread_id": thread_id, "assistant_id": self._assistant_id}
        if instructions:
            kwargs["instructions"] = instructions
        try:
            run = self._client.beta.threads.runs.create(**kwargs)
        except OpenAIError as e:
            logger.error(f"Failed to start run on thread {thread_id}: {e}")
            raise ModelError(f"Could not start the assistant: {e}") from e
        return self._to_state(run)

    def retrieve_run(self, thread_id: str, run_id: str) -> RunState:
        """Fetch the current state of a run."""
        try:
            run = self._client.beta.threads.runs.retrieve(run_id=run_id, thread_id=thread_id)
        except OpenAIError as e:
            logger.error(f"Failed to check run {run_id}: {e}")
            raise ModelError(f"Could not check the assistant run: {e}") from e
        return self._to_state(run)

    def cancel_run(self, thread_id: str, run_id: str) -> None:
        """Ask the service to cancel a run."""
        try:
            self._client.beta.threads.runs.cancel(run_id=run_id, thread_id=thread_id)
        except OpenAIError as e:
            logger.error(f"Failed to cancel run {run_id}: {e}")
            raise ModelError(f"Could not cancel the assistant run: {e}") from e
        logger.info(f"Cancellation requested for run {run_id}")

    def latest_message(self, thread_id: str) -> Optional[ThreadMessage]:
        """Return the most recent message on a thread, if any."""
        try:
            page = self._client.beta.threads.messages.list(thread_id, order="desc", limit=1)
        except OpenAIError as e:
            logger.error(f"Failed to list messages on thread {thread_id}: {e}")
            raise ModelError(f"Could not read the assistant reply: {e}") from e

        if not page.data:
            return None

        message = page.data[0]
        text = None
        if message.content and message.content[0].type == "text":
            text = message.content[0].text.value
        return ThreadMessage(role=message.role, text=text)

    @staticmethod
    def _to_state(run) -> RunState:
        last_error = getattr(run, "last_error", None)
        return RunState(
            run_id=run.id,
            status=RunStatus(run.status),
            error_code=getattr(last_error, "code", None) if last_error else None,
            error_message=getattr(last_error, "message", None) if last_error else None,
        )
