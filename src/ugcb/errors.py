"""Error taxonomy for the brief pipelines.

Every failure the pipelines can report is a subclass of :class:`UGCBError`
carrying a short ``kind`` tag, so callers can render a specific message per
failure class instead of a generic one.
"""

from typing import Optional


class UGCBError(Exception):
    """Base class for all classified failures."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        # Set by the chat loop once an assistant thread exists
        self.thread_id: Optional[str] = None


class InputValidationError(UGCBError):
    """Bad caller input (malformed URL, empty message, unknown scene)."""

    kind = "input"


class FetchError(UGCBError):
    """The source page could not be fetched."""

    kind = "fetch"


class ContentError(UGCBError):
    """The source page did not contain enough text to build a brief."""

    kind = "content"


class ModelRefusalError(ContentError):
    """The model used its error escape hatch instead of returning a brief."""


class ModelError(UGCBError):
    """The LLM collaborator was unreachable or rejected the request."""

    kind = "model"


class ParseError(UGCBError):
    """No JSON object could be recovered from the model output."""

    kind = "parse"

    def __init__(self, message: str, raw_text: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class StructuralError(UGCBError):
    """JSON was recovered but does not have the shape of a brief."""

    kind = "structural"


class RunTimeoutError(UGCBError):
    """An assistant run did not reach a terminal state in time."""

    kind = "timeout"


class RunFailedError(UGCBError):
    """An assistant run ended in a non-successful terminal state."""

    kind = "run-failure"


class NoResponseError(UGCBError):
    """A completed run left no assistant text to read."""

    kind = "no-response"


class ImageGenerationError(UGCBError):
    """Scene image generation or upload failed."""

    kind = "image"


class StorageError(UGCBError):
    """A blob upload or database write failed."""

    kind = "storage"
