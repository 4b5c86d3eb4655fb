from types import SimpleNamespace

import pytest
import requests
from openai import OpenAIError

from app.core.config import Settings
from app.services.vision_client import (
    DEFAULT_OPENROUTER_MODEL,
    OPENROUTER_URL,
    OpenAIVisionClient,
    OpenRouterVisionClient,
    VisionClient,
    VisionClientError,
    build_messages,
    build_vision_client,
    reply_text,
)


class FakeCompletions:
    def __init__(self, content="Plant: Fern", error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _openai_client(completions, **kwargs):
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIVisionClient("sk-test", client=sdk, **kwargs)


class FakeResponse:
    def __init__(self, payload, status_error=None):
        self.payload = payload
        self.status_error = status_error

    def raise_for_status(self):
        if self.status_error is not None:
            raise self.status_error

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def test_build_messages_text_only():
    assert build_messages("hello") == [{"role": "user", "content": "hello"}]


def test_build_messages_with_image():
    content = build_messages("hello", "abc")[0]["content"]
    assert content[0] == {"type": "text", "text": "hello"}
    assert content[1]["image_url"]["url"] == "data:image/jpeg;base64,abc"


def test_openai_client_sends_settings():
    completions = FakeCompletions()
    client = _openai_client(completions, max_tokens=500, temperature=0.2)
    assert client.complete("prompt", base64_image="abc") == "Plant: Fern"
    assert completions.kwargs["model"] == "gpt-4o"
    assert completions.kwargs["max_tokens"] == 500
    assert completions.kwargs["temperature"] == 0.2
    assert completions.kwargs["messages"] == build_messages("prompt", "abc")


def test_openai_client_wraps_sdk_errors():
    client = _openai_client(FakeCompletions(error=OpenAIError("rate limited")))
    with pytest.raises(VisionClientError, match="rate limited"):
        client.complete("prompt")


def test_empty_reply_is_an_error():
    client = _openai_client(FakeCompletions(content="   "))
    with pytest.raises(VisionClientError):
        client.complete("prompt")


def test_openrouter_client_parses_content_parts():
    payload = {"choices": [{"message": {"content": [{"type": "text", "text": "Plant: Fern"}]}}]}
    session = FakeSession(FakeResponse(payload))
    client = OpenRouterVisionClient("or-key", session=session)

    assert client.complete("prompt") == "Plant: Fern"
    url, kwargs = session.requests[0]
    assert url == OPENROUTER_URL
    assert kwargs["headers"]["Authorization"] == "Bearer or-key"
    assert kwargs["json"]["model"] == DEFAULT_OPENROUTER_MODEL


def test_openrouter_client_wraps_transport_errors():
    session = FakeSession(error=requests.ConnectionError("no route"))
    client = OpenRouterVisionClient("or-key", session=session)
    with pytest.raises(VisionClientError, match="no route"):
        client.complete("prompt")


def test_openrouter_client_rejects_unexpected_shape():
    session = FakeSession(FakeResponse({"error": {"message": "bad model"}}))
    client = OpenRouterVisionClient("or-key", session=session)
    with pytest.raises(VisionClientError):
        client.complete("prompt")


def test_build_vision_client_prefers_openai():
    s = Settings(_env_file=None, openai_api_key="sk-test", openrouter_api_key="or-key")
    client = build_vision_client(s)
    assert isinstance(client, OpenAIVisionClient)
    assert client.model == s.openai_model


def test_build_vision_client_openrouter():
    s = Settings(_env_file=None, openai_api_key=None, openrouter_api_key="or-key", openrouter_model="x/y")
    client = build_vision_client(s)
    assert isinstance(client, OpenRouterVisionClient)
    assert client.model == "x/y"


def test_build_vision_client_without_keys():
    s = Settings(_env_file=None, openai_api_key=None, openrouter_api_key=None)
    assert build_vision_client(s) is None


def test_vision_client_is_abstract():
    with pytest.raises(TypeError):
        VisionClient("gpt-4o")


@pytest.mark.parametrize(
    "payload,expected",
    [
        ({"choices": [{"message": {"content": "Plant: Fern"}}]}, "Plant: Fern"),
        ({"choices": [{"message": {"content": [{"text": "Plant: "}, {"text": "Fern"}]}}]}, "Plant: Fern"),
        ({"choices": [{"text": "Plant: Fern"}]}, "Plant: Fern"),
        ({"choices": [{"message": "oops"}]}, None),
        ({"choices": []}, None),
        ({"error": {"message": "bad model"}}, None),
        (["not", "a", "dict"], None),
    ],
)
def test_reply_text_shapes(payload, expected):
    assert reply_text(payload) == expected
