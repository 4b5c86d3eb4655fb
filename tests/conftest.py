"""
Pytest configuration and fixtures
"""
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.services.vision_client import VisionClientError

SAMPLE_RESPONSE = """Plant: Monstera
Species: Monstera deliciosa
Plant Size: Large
Growth Stage: Established
Description: A climbing tropical plant with split leaves.

HEALTH ASSESSMENT: Mostly healthy, with some yellowing leaves near the base.

Care Recommendations:
- Watering: Every 10 days, until water drains
- Light Requirements: Bright indirect light
- Humidity: 60% or higher
- Temperature: 18-27°C
- Pruning: Remove damaged leaves

Interesting Facts:
1. Monstera leaves develop holes as they mature
2. It is native to Central America
3. Aerial roots help it climb
"""


class FakeVisionClient:
    """Records calls and returns a canned reply (or raises one)."""

    def __init__(self, reply=SAMPLE_RESPONSE, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, prompt, base64_image=None):
        self.calls.append({"prompt": prompt, "base64_image": base64_image})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, openai_api_key=None, openrouter_api_key=None)


@pytest.fixture
def fake_client():
    return FakeVisionClient()


@pytest.fixture
def client(test_settings, fake_client):
    return TestClient(create_app(test_settings, vision_client=fake_client))


@pytest.fixture
def failing_client(test_settings):
    fake = FakeVisionClient(error=VisionClientError("quota exceeded"))
    return TestClient(create_app(test_settings, vision_client=fake))


@pytest.fixture
def unconfigured_client(test_settings):
    return TestClient(create_app(test_settings))
