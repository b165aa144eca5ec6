"""Tests for the brief/scene model, normalization and delta merging."""

import pytest

from conftest import make_brief_data, make_scene
from ugcb.errors import StructuralError
from ugcb.models import Brief, Scene, apply_delta, normalize_scene, normalize_scenes, placeholder_image_url


def test_normalize_fills_every_missing_field():
    scene = normalize_scene({}, position=2)

    assert scene.scene_number == 3
    assert scene.scene_title == ""
    assert scene.script == ""
    assert scene.tone is None
    assert scene.time_seconds is None
    assert scene.visual.description is None
    assert scene.visual.image_url == placeholder_image_url(3)
    assert not scene.visual.has_asset


def test_normalize_maps_legacy_chat_shape():
    scene = normalize_scene(
        {
            "sceneNumber": 1,
            "script": "Hi!",
            "tone": "Positiv",
            "durationSeconds": 8,
            "visualDescription": "Selfie in a kitchen",
        },
        position=0,
    )

    assert scene.tone == ["Positiv"]
    assert scene.time_seconds == 8
    assert scene.visual.description == "Selfie in a kitchen"


def test_unknown_tone_is_rejected_not_dropped():
    with pytest.raises(StructuralError, match="Unknown tone"):
        normalize_scene(make_scene(1, tone=["Informativ", "Sarcastic"]), position=0)


def test_non_object_scene_is_structural_error():
    with pytest.raises(StructuralError):
        normalize_scene("just text", position=0)


def test_scenes_are_resequenced_by_number():
    raw = [make_scene(3), make_scene(1), make_scene(2)]
    scenes = normalize_scenes(raw)

    assert [s.scene_number for s in scenes] == [1, 2, 3]
    assert [s.scene_title for s in scenes] == ["Scene 1", "Scene 2", "Scene 3"]


def test_duplicate_and_gapped_numbers_become_contiguous():
    raw = [make_scene(2, sceneTitle="a"), make_scene(2, sceneTitle="b"), make_scene(7, sceneTitle="c")]
    scenes = normalize_scenes(raw)

    assert [s.scene_number for s in scenes] == [1, 2, 3]
    assert [s.scene_title for s in scenes] == ["a", "b", "c"]
    assert scenes[2].visual.image_url == placeholder_image_url(3)


def test_renumbering_keeps_real_assets():
    raw = [make_scene(5, visual={"description": "x", "imageUrl": "https://cdn.example.com/a.png"})]
    scene = normalize_scenes(raw)[0]

    assert scene.scene_number == 1
    assert scene.visual.image_url == "https://cdn.example.com/a.png"
    assert scene.visual.has_asset


def test_validate_complete_requires_scenes_and_scripts():
    with pytest.raises(StructuralError, match="no scenes"):
        Brief(title="t", language="en").validate_complete()

    brief = Brief(title="t", language="en", scenes=normalize_scenes([make_scene(1, script="  ")]))
    with pytest.raises(StructuralError, match="empty script"):
        brief.validate_complete()


def test_delta_replaces_title_and_whole_scene_list(brief_data):
    brief = Brief(title="Old", language="da", scenes=normalize_scenes(brief_data["scenes"]))
    delta = {
        "title": "New",
        "summaryOfChanges": "Cut to two scenes.",
        "scenes": [{"script": "Only one"}, {"sceneNumber": 2, "script": "And two"}],
    }

    merged = apply_delta(brief, delta)

    assert merged.title == "New"
    assert merged.language == "da"
    assert [s.script for s in merged.scenes] == ["Only one", "And two"]
    assert merged.scenes[0].scene_number == 1
    assert merged.scenes[0].tone is None
    # the input is left untouched
    assert brief.title == "Old"
    assert len(brief.scenes) == 5


def test_delta_without_scenes_keeps_scenes(brief_data):
    brief = Brief(title="Old", language="en", scenes=normalize_scenes(brief_data["scenes"]))
    merged = apply_delta(brief, {"title": "Renamed"})

    assert merged.title == "Renamed"
    assert merged.scenes == brief.scenes


def test_yaml_round_trip(tmp_path):
    data = make_brief_data()
    brief = Brief(
        title=data["title"],
        language="da",
        source_url="https://example.com",
        scenes=normalize_scenes(data["scenes"]),
    )
    brief.scenes[0].tone = ["Ægte"]
    path = tmp_path / "brief.yaml"

    brief.to_yaml(path)

    assert "Ægte" in path.read_text(encoding="utf-8")
    assert Brief.from_yaml(path) == brief


def test_scene_accepts_wire_aliases():
    scene = Scene.model_validate(make_scene(4))
    assert scene.scene_number == 4
    assert scene.time_seconds == 5
