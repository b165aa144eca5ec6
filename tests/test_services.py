"""Tests for the collaborator client wrappers, with fake SDK objects."""

import base64
from types import SimpleNamespace

import httpx
import pytest
from anthropic import APIConnectionError

from ugcb.errors import InputValidationError, ModelError
from ugcb.services.anthropic import AnthropicClient
from ugcb.services.assistant import AssistantClient, RunStatus
from ugcb.services.imagen import ImagenClient
from ugcb.services.storage import MAX_IMAGE_BYTES, BlobStore


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------


def test_json_message_prepends_prefill(make_llm):
    client, sdk = make_llm('"a": 1}')

    assert client.create_json_message("prompt", system="sys") == '{"a": 1}'
    call = sdk.messages.calls[0]
    assert call["system"] == "sys"
    assert call["model"] == "test-model"
    assert call["messages"][-1] == {"role": "assistant", "content": "{"}


def test_connection_error_becomes_model_error():
    class Unreachable:
        def create(self, **kwargs):
            raise APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com"))

    client = AnthropicClient(client=SimpleNamespace(messages=Unreachable()))

    with pytest.raises(ModelError, match="Could not reach"):
        client.create_message("hello")


def test_missing_api_key_is_config_error(monkeypatch):
    from ugcb.config import config

    monkeypatch.setattr(config, "anthropic_api_key", "")
    with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
        AnthropicClient()


# ---------------------------------------------------------------------------
# Assistant threads
# ---------------------------------------------------------------------------


class _Runs:
    def __init__(self):
        self.cancelled = []

    def create(self, **kwargs):
        return SimpleNamespace(id="run_9", status="queued", last_error=None)

    def retrieve(self, run_id, thread_id):
        return SimpleNamespace(
            id=run_id,
            status="failed",
            last_error=SimpleNamespace(code="server_error", message="boom"),
        )

    def cancel(self, run_id, thread_id):
        self.cancelled.append((thread_id, run_id))


class _Messages:
    def __init__(self, data):
        self.data = data
        self.list_kwargs = None

    def create(self, thread_id, role, content):
        pass

    def list(self, thread_id, **kwargs):
        self.list_kwargs = kwargs
        return SimpleNamespace(data=self.data)


def _openai(messages):
    runs = _Runs()
    threads = SimpleNamespace(
        create=lambda: SimpleNamespace(id="thread_x"),
        runs=runs,
        messages=_Messages(messages),
    )
    return SimpleNamespace(beta=SimpleNamespace(threads=threads)), runs


def test_run_state_carries_last_error():
    sdk, _ = _openai([])
    client = AssistantClient(assistant_id="asst_1", client=sdk)

    assert client.create_run("thread_x").status == RunStatus.QUEUED
    state = client.retrieve_run("thread_x", "run_9")
    assert state.status == RunStatus.FAILED
    assert (state.error_code, state.error_message) == ("server_error", "boom")


def test_latest_message_reads_newest_text():
    text_block = SimpleNamespace(type="text", text=SimpleNamespace(value="hello"))
    sdk, _ = _openai([SimpleNamespace(role="assistant", content=[text_block])])
    client = AssistantClient(assistant_id="asst_1", client=sdk)

    message = client.latest_message("thread_x")

    assert (message.role, message.text) == ("assistant", "hello")
    assert sdk.beta.threads.messages.list_kwargs == {"order": "desc", "limit": 1}


def test_latest_message_without_text():
    image_block = SimpleNamespace(type="image_file")
    sdk, _ = _openai([SimpleNamespace(role="assistant", content=[image_block])])
    client = AssistantClient(assistant_id="asst_1", client=sdk)

    assert client.latest_message("thread_x").text is None


def test_empty_thread_has_no_latest_message():
    sdk, _ = _openai([])
    assert AssistantClient(assistant_id="asst_1", client=sdk).latest_message("t") is None


def test_cancel_is_forwarded():
    sdk, runs = _openai([])
    AssistantClient(assistant_id="asst_1", client=sdk).cancel_run("thread_x", "run_9")
    assert runs.cancelled == [("thread_x", "run_9")]


# ---------------------------------------------------------------------------
# Blob storage
# ---------------------------------------------------------------------------


class _Blob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name

    def upload_from_string(self, data, content_type):
        self.bucket.uploads.append((self.name, data, content_type))

    @property
    def public_url(self):
        return f"https://storage.googleapis.com/{self.bucket.name}/{self.name}"


class _Bucket:
    def __init__(self, name):
        self.name = name
        self.uploads = []

    def blob(self, name):
        return _Blob(self, name)


class _StorageClient:
    def __init__(self):
        self.buckets = {}

    def bucket(self, name):
        return self.buckets.setdefault(name, _Bucket(name))


@pytest.fixture
def blob_store():
    client = _StorageClient()
    return BlobStore(bucket_name="ugc-assets", client=client), client


def test_put_returns_public_url(blob_store):
    store, client = blob_store

    url = store.put(b"png-bytes", "image/png", prefix="scenes", filename="scene-1.png")

    name, data, content_type = client.buckets["ugc-assets"].uploads[0]
    assert name.startswith("scenes/") and name.endswith("-scene-1.png")
    assert (data, content_type) == (b"png-bytes", "image/png")
    assert url == f"https://storage.googleapis.com/ugc-assets/{name}"


def test_upload_image_validates_type(blob_store, tmp_path):
    store, _ = blob_store
    path = tmp_path / "notes.txt"
    path.write_text("hi")

    with pytest.raises(InputValidationError, match="Invalid file type"):
        store.upload_image(path)


def test_upload_image_validates_size(blob_store, tmp_path):
    store, _ = blob_store
    path = tmp_path / "huge.png"
    path.write_bytes(b"0" * (MAX_IMAGE_BYTES + 1))

    with pytest.raises(InputValidationError, match="5MB"):
        store.upload_image(path)


def test_upload_image(blob_store, tmp_path):
    store, client = blob_store
    path = tmp_path / "headshot.jpg"
    path.write_bytes(b"jpeg")

    url, mime_type, size = store.upload_image(path, prefix="headshots")

    assert mime_type == "image/jpeg"
    assert size == 4
    assert "/headshots/" in url


# ---------------------------------------------------------------------------
# Imagen
# ---------------------------------------------------------------------------


class _PostSession:
    def __init__(self, status_code, payload=None, text=""):
        self.response = SimpleNamespace(status_code=status_code, text=text, json=lambda: payload)
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers})
        return self.response


def test_imagen_requests_portrait_and_decodes(monkeypatch):
    payload = {"predictions": [{"bytesBase64Encoded": base64.b64encode(b"img").decode()}]}
    session = _PostSession(200, payload)
    client = ImagenClient(project_id="proj", session=session)
    monkeypatch.setattr(client, "_access_token", lambda: "token")

    result = client.generate_image("a kitchen")

    assert result.error_message is None
    assert result.image_data == b"img"
    assert session.calls[0]["json"]["parameters"]["aspectRatio"] == "9:16"
    assert session.calls[0]["headers"]["Authorization"] == "Bearer token"


def test_imagen_http_error_is_reported(monkeypatch):
    client = ImagenClient(project_id="proj", session=_PostSession(403, text="denied"))
    monkeypatch.setattr(client, "_access_token", lambda: "token")

    result = client.generate_image("a kitchen")

    assert result.image_data is None
    assert result.error_message == "403: denied"
