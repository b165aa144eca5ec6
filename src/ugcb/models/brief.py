"""Brief data model and the normalization applied to model output."""

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import StructuralError
from .scene import Scene, Visual


class Brief(BaseModel):
    """A multi-scene content plan for a brand or product."""

    title: str = Field(default="", description="Brief title")
    language: str = Field(default="", description="Detected language code")
    scenes: list[Scene] = Field(default_factory=list, description="Ordered scenes")
    source_url: Optional[str] = Field(None, alias="sourceUrl")

    class Config:
        """Pydantic config."""
        frozen = False
        populate_by_name = True

    def validate_complete(self) -> None:
        """Check the invariants a brief must hold before it is used.

        Raises:
            StructuralError: If there are no scenes, a script is empty, or the
                scene numbers are not exactly 1..n.
        """
        if not self.scenes:
            raise StructuralError("Brief has no scenes")

        empty = [s.scene_number for s in self.scenes if not s.script.strip()]
        if empty:
            raise StructuralError(
                f"Scene(s) {', '.join(map(str, empty))} have an empty script"
            )

        numbers = [s.scene_number for s in self.scenes]
        if numbers != list(range(1, len(numbers) + 1)):
            raise StructuralError(f"Scene numbers are not contiguous from 1: {numbers}")

    def scene(self, scene_number: int) -> Optional[Scene]:
        """Return the scene with the given number, if any."""
        for scene in self.scenes:
            if scene.scene_number == scene_number:
                return scene
        return None

    @property
    def total_seconds(self) -> float:
        return sum(scene.time_seconds or 0 for scene in self.scenes)

    def to_wire(self) -> dict[str, Any]:
        """Return the camelCase JSON shape the models read and write."""
        return self.model_dump(by_alias=True, mode="json", exclude={"source_url"})

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), ensure_ascii=False, indent=2)

    @classmethod
    def from_yaml(cls, path: Path) -> "Brief":
        """Load a brief from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)

    def to_yaml(self, path: Path) -> None:
        """Save the brief to a YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.model_dump(by_alias=True, mode="json"),
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            )


class ChatTurn(BaseModel):
    """Result of one conversational editing turn."""

    display_text: str = Field(..., description="Short text to show in the chat")
    thread_id: str = Field(..., description="Opaque assistant thread handle")
    brief_delta: Optional[dict[str, Any]] = Field(
        None, description="Parsed brief object for the caller to merge"
    )


def normalize_scene(raw: Any, position: int) -> Scene:
    """Build a Scene from model output, filling every missing field.

    This is the single place where defaults for absent fields are decided:
    empty script and title, no tone, duration or description, a scene number
    of ``position + 1`` and a placeholder image. The older conversational
    shape (``visualDescription``, ``durationSeconds``, a single ``tone``
    string) is mapped onto the canonical shape here too.

    Args:
        raw: One element of a ``scenes`` array.
        position: Zero-based index of the element in that array.

    Returns:
        The normalized scene.

    Raises:
        StructuralError: If the element is not an object or a field has an
            invalid value (including tones outside the vocabulary).
    """
    if not isinstance(raw, dict):
        raise StructuralError(f"Scene {position + 1} is not an object")

    visual_raw = raw.get("visual")
    visual = dict(visual_raw) if isinstance(visual_raw, dict) else {}
    if not visual.get("description") and raw.get("visualDescription"):
        visual["description"] = raw["visualDescription"]

    tone = raw.get("tone")
    if isinstance(tone, str):
        tone = [tone] if tone.strip() else None
    elif tone == []:
        tone = None

    duration = raw.get("timeSeconds")
    if duration is None:
        duration = raw.get("durationSeconds")

    scene_number = raw.get("sceneNumber")
    if scene_number is None:
        scene_number = position + 1

    try:
        return Scene(
            scene_number=scene_number,
            scene_title=raw.get("sceneTitle") or "",
            script=raw.get("script") or "",
            tone=tone,
            time_seconds=duration,
            visual=Visual(
                description=visual.get("description"),
                image_url=visual.get("imageUrl") or "",
            ),
        )
    except ValidationError as e:
        raise StructuralError(f"Scene {position + 1} is invalid: {e}") from e


def resequence_scenes(scenes: list[Scene]) -> list[Scene]:
    """Order scenes by their number and renumber them 1..n.

    Ties keep their array order, so duplicate numbers from the model still
    produce unique, contiguous numbers.
    """
    ordered = sorted(enumerate(scenes), key=lambda item: (item[1].scene_number, item[0]))
    result = []
    for number, (_, scene) in enumerate(ordered, start=1):
        scene.renumber(number)
        result.append(scene)
    return result


def normalize_scenes(raw_scenes: Any) -> list[Scene]:
    """Normalize a ``scenes`` array from model output."""
    if not isinstance(raw_scenes, list):
        raise StructuralError("'scenes' is not an array")
    scenes = [normalize_scene(raw, i) for i, raw in enumerate(raw_scenes)]
    return resequence_scenes(scenes)


def apply_delta(brief: Brief, delta: Optional[dict[str, Any]]) -> Brief:
    """Merge a conversational delta into a working brief.

    A ``title`` replaces the title. A ``scenes`` array replaces the whole
    scene list; scenes are never merged individually. Other fields of the
    working brief are kept.

    Returns:
        A new Brief; the input is not modified.
    """
    merged = brief.model_copy(deep=True)
    if not delta:
        return merged

    title = delta.get("title")
    if isinstance(title, str) and title.strip():
        merged.title = title

    language = delta.get("language")
    if isinstance(language, str) and language.strip():
        merged.language = language

    if "scenes" in delta and delta["scenes"] is not None:
        merged.scenes = normalize_scenes(delta["scenes"])

    return merged
