"""Shared plumbing for agents that ask a language model for JSON."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from ..errors import ParseError
from ..parsing import parse_json_object
from ..services.anthropic import AnthropicClient

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """An agent with a fixed system prompt and a single ``run`` entry point.

    Subclasses name themselves, supply the system prompt, and turn the JSON
    object returned by ``_request_json`` into their own result type.
    """

    def __init__(self, client: Optional[AnthropicClient] = None, model: Optional[str] = None) -> None:
        self._client = client or AnthropicClient(model=model)
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        ...

    @property
    def model(self) -> str:
        return self._client.model

    @abstractmethod
    def run(self, input_data: InputT) -> OutputT:
        ...

    def _request_json(self, prompt: str, max_tokens: int = 4096, temperature: float = 0.7) -> dict[str, Any]:
        """Ask the model for a single JSON object and parse it.

        Raises:
            ModelError: If the model call fails.
            ParseError: If the reply holds no object or the object is not valid JSON.
        """
        self._logger.debug(f"Prompt: {len(prompt)} chars, model {self.model}")
        reply = self._client.create_json_message(
            prompt=prompt,
            max_tokens=max_tokens,
            system=self.system_prompt,
            temperature=temperature,
        )

        data = parse_json_object(reply)
        if data is None:
            self._logger.debug(f"Raw reply: {reply}")
            raise ParseError("No JSON object found in the model response.", raw_text=reply)
        return data
