"""External service integrations."""

from .anthropic import AnthropicClient
from .assistant import AssistantClient, RunState, RunStatus, ThreadMessage
from .imagen import ImagenClient, ImageResult
from .storage import BlobStore

__all__ = [
    "AnthropicClient",
    "AssistantClient",
    "RunState",
    "RunStatus",
    "ThreadMessage",
    "ImagenClient",
    "ImageResult",
    "BlobStore",
]
