"""Data models for briefs and the catalog."""

from .scene import Scene, Visual, placeholder_image_url
from .brief import Brief, ChatTurn, apply_delta, normalize_scene, normalize_scenes, resequence_scenes
from .catalog import Actor, ActorType, Asset, Brand, Gender

__all__ = [
    "Scene",
    "Visual",
    "placeholder_image_url",
    "Brief",
    "ChatTurn",
    "apply_delta",
    "normalize_scene",
    "normalize_scenes",
    "resequence_scenes",
    "Actor",
    "ActorType",
    "Asset",
    "Brand",
    "Gender",
]
