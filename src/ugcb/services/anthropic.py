"""Anthropic Claude API client wrapper."""

import logging
from typing import Optional

from anthropic import Anthropic, APIError, APIConnectionError, APIStatusError

from ..config import config
from ..errors import ModelError

logger = logging.getLogger(__name__)


class AnthropicClient:
    """Client wrapper for the Anthropic Claude API.

    Requests are not retried: every failure is reported to the caller as a
    ModelError so it can decide whether to resubmit.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Anthropic] = None,
    ) -> None:
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key. Defaults to ANTHROPIC_API_KEY env var.
            model: Model to use. Defaults to config.default_model.
            client: Preconfigured SDK client, mainly for tests.
        """
        self._model = model or config.default_model

        if client is not None:
            self._client = client
            return

        self._api_key = api_key or config.anthropic_api_key
        if not self._api_key:
            raise ValueError(
                "Anthropic API key not provided. Set ANTHROPIC_API_KEY env var."
            )
        self._client = Anthropic(api_key=self._api_key, max_retries=0)

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    def create_message(
        self,
        prompt: str,
        max_tokens: int = 4096,
        system: Optional[str] = None,
        temperature: float = 0.7,
        prefill: Optional[str] = None,
    ) -> str:
        """Create a message using Claude.

        Args:
            prompt: The user prompt to send.
            max_tokens: Maximum tokens in the response.
            system: Optional system prompt.
            temperature: Sampling temperature (0.0-1.0).
            prefill: Optional start of the assistant turn; it is prepended to
                the returned text.

        Returns:
            The text content of Claude's response.

        Raises:
            ModelError: If the API request fails or returns no text.
        """
        messages = [{"role": "user", "content": prompt}]
        if prefill:
            messages.append({"role": "assistant", "content": prefill})

        kwargs = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": messages,
            "temperature": temperature,
        }
        if system:
            kwargs["system"] = system

        logger.debug(f"Sending request to Claude ({self._model})")

        try:
            response = self._client.messages.create(**kwargs)

        except APIConnectionError as e:
            logger.error(f"Connection error: {e}")
            raise ModelError(f"Could not reach the language model: {e}") from e

        except APIStatusError as e:
            logger.error(f"API error: {e.status_code} {e.message}")
            raise ModelError(f"Language model API error: {e.status_code} {e.message}") from e

        except APIError as e:
            logger.error(f"API error: {e}")
            raise ModelError(f"Language model API error: {e}") from e

        texts = [block.text for block in response.content if hasattr(block, "text")]
        if not texts:
            raise ModelError("No text content received from the language model")
        return (prefill or "") + "".join(texts)

    def create_json_message(
        self,
        prompt: str,
        max_tokens: int = 4096,
        system: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Create a message constrained to a single JSON object.

        The assistant turn is prefilled with ``{`` so the reply starts inside
        the object; the returned text includes that brace.
        """
        return self.create_message(
            prompt=prompt,
            max_tokens=max_tokens,
            system=system,
            temperature=temperature,
            prefill="{",
        )
