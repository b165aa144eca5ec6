"""AI agents for brief generation and editing."""

from .base import BaseAgent
from .brief import BriefAgent, generate_brief
from .chat import BriefChat, BriefConversation, chat_turn
from .imagery import SceneImager, build_image_prompt

__all__ = [
    "BaseAgent",
    "BriefAgent",
    "generate_brief",
    "BriefChat",
    "BriefConversation",
    "chat_turn",
    "SceneImager",
    "build_image_prompt",
]
