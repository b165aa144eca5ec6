"""Pytest configuration and fixtures.

Every external collaborator is replaced by a small in-memory fake so the
suite runs without network access or credentials.
"""

import copy
import json
from types import SimpleNamespace
from typing import Optional

import pytest

from ugcb.config import config
from ugcb.services.anthropic import AnthropicClient
from ugcb.services.assistant import RunState, RunStatus, ThreadMessage


ARTICLE_TEXT = (
    "Nordic Oat Bar is a crunchy snack made from Danish oats, honey and sea salt. "
    "Each bar has 8 grams of protein and no added sugar, and it fits in any bag."
)


def make_scene(number: int, **overrides) -> dict:
    scene = {
        "sceneNumber": number,
        "sceneTitle": f"Scene {number}",
        "script": f"Script line for scene {number}.",
        "tone": ["Informativ"],
        "timeSeconds": 5,
        "visual": {
            "description": f"Close-up shot {number}",
            "imageUrl": f"https://via.placeholder.com/600x400?text=Scene+{number}+Visual",
        },
    }
    scene.update(overrides)
    return scene


def make_brief_data(scene_count: int = 5, **overrides) -> dict:
    data = {
        "title": "Crunch Into Your Day",
        "language": "en",
        "scenes": [make_scene(i) for i in range(1, scene_count + 1)],
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", reason: str = "OK"):
        self.status_code = status_code
        self.text = text
        self.reason = reason


class FakeSession:
    """Stands in for requests.Session.get."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls: list[dict] = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


class FakeMessages:
    def __init__(self, replies: list[str]):
        self.replies = list(replies)
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        text = self.replies.pop(0)
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


class FakeAnthropicSDK:
    """Stands in for anthropic.Anthropic."""

    def __init__(self, *replies: str):
        self.messages = FakeMessages(list(replies))


class FakeAssistant:
    """Duck-typed AssistantClient recording every call."""

    def __init__(
        self,
        statuses: Optional[list[str]] = None,
        reply: Optional[ThreadMessage] = None,
        final_error: Optional[tuple[str, str]] = None,
    ):
        self.statuses = list(statuses or ["completed"])
        self.reply = reply
        self.final_error = final_error
        self.calls: list[tuple] = []
        self.threads_created = 0

    def _count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def create_thread(self) -> str:
        self.threads_created += 1
        self.calls.append(("create_thread",))
        return f"thread_{self.threads_created}"

    def add_message(self, thread_id: str, content: str) -> None:
        self.calls.append(("add_message", thread_id, content))

    def create_run(self, thread_id: str, instructions: Optional[str] = None) -> RunState:
        self.calls.append(("create_run", thread_id, instructions))
        return RunState(run_id="run_1", status=RunStatus.QUEUED)

    def retrieve_run(self, thread_id: str, run_id: str) -> RunState:
        self.calls.append(("retrieve_run", thread_id, run_id))
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        state = RunState(run_id=run_id, status=RunStatus(status))
        if self.final_error and not state.status.is_pending:
            state.error_code, state.error_message = self.final_error
        return state

    def cancel_run(self, thread_id: str, run_id: str) -> None:
        self.calls.append(("cancel_run", thread_id, run_id))

    def latest_message(self, thread_id: str) -> Optional[ThreadMessage]:
        self.calls.append(("latest_message", thread_id))
        return self.reply


class FakeClock:
    """Monotonic clock advanced only by the paired sleep function."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def default_tones(monkeypatch):
    """Pin the tone vocabulary regardless of the developer's environment."""
    monkeypatch.setattr(
        config,
        "tone_vocabulary",
        ["Relaterende", "Spørgende", "Forstående", "Ægte", "Informativ",
         "Positiv", "Praktisk", "Inspirerende", "Opmuntrende", "Oprigtig"],
    )


@pytest.fixture
def brief_data() -> dict:
    return copy.deepcopy(make_brief_data())


@pytest.fixture
def article_html() -> str:
    return f"<html><body><nav>Menu</nav><article><p>{ARTICLE_TEXT}</p></article></body></html>"


@pytest.fixture
def make_llm():
    """Build an AnthropicClient whose SDK returns the given replies."""

    def _make(*replies: str) -> tuple[AnthropicClient, FakeAnthropicSDK]:
        sdk = FakeAnthropicSDK(*replies)
        return AnthropicClient(client=sdk, model="test-model"), sdk

    return _make


@pytest.fixture
def json_reply():
    """Render brief data the way a JSON-prefilled model reply arrives (without the '{')."""

    def _render(data: dict) -> str:
        return json.dumps(data, ensure_ascii=False)[1:]

    return _render
