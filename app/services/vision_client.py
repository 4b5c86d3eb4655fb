import logging
from abc import ABC, abstractmethod

import requests
from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_OPENROUTER_MODEL = "openai/gpt-4o"


class VisionClientError(Exception):
    """Raised when the upstream model call fails or returns nothing usable."""


def build_messages(prompt, base64_image=None):
    if not base64_image:
        return [{"role": "user", "content": prompt}]
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:image/jpeg;base64,{base64_image}"},
                },
            ],
        }
    ]


def reply_text(payload):
    """
    Pull the reply out of a chat-completions JSON payload. `content` may be
    a plain string or a list of parts; legacy completions put it in `text`.
    """
    try:
        choice = payload["choices"][0]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(choice, dict):
        return None

    message = choice.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = [p.get("text", "") if isinstance(p, dict) else str(p) for p in content]
        return "".join(texts) or None
    return choice.get("text")


class VisionClient(ABC):
    """Sends one prompt (optionally with a photo) and returns the reply text."""

    def __init__(self, model, max_tokens=1000, temperature=0.7, timeout=30.0):
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    def complete(self, prompt: str, base64_image: str | None = None) -> str:
        content = self._create(build_messages(prompt, base64_image))
        if not content or not content.strip():
            raise VisionClientError("Model returned an empty response")
        return content

    @abstractmethod
    def _create(self, messages) -> str | None:
        """Send `messages` to the backend and return the raw reply text."""


class OpenAIVisionClient(VisionClient):
    def __init__(self, api_key, model="gpt-4o", client=None, **kwargs):
        super().__init__(model, **kwargs)
        self._client = client or OpenAI(api_key=api_key, timeout=self.timeout)

    def _create(self, messages):
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            raise VisionClientError(str(e)) from e
        return resp.choices[0].message.content


class OpenRouterVisionClient(VisionClient):
    def __init__(self, api_key, model=DEFAULT_OPENROUTER_MODEL, session=None, **kwargs):
        super().__init__(model, **kwargs)
        self.api_key = api_key
        self._session = session or requests.Session()

    def _create(self, messages):
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        try:
            r = self._session.post(OPENROUTER_URL, headers=headers, json=payload, timeout=self.timeout)
            r.raise_for_status()
            jr = r.json()
        except (requests.RequestException, ValueError) as e:
            raise VisionClientError(f"OpenRouter request failed: {e}") from e
        return reply_text(jr)


def build_vision_client(settings):
    """
    Pick the model backend from settings: OpenAI first, then OpenRouter.
    Returns None when neither key is configured.
    """
    common = dict(
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        timeout=settings.request_timeout,
    )
    if settings.openai_api_key:
        logger.info("Using OpenAI model %s", settings.openai_model)
        return OpenAIVisionClient(settings.openai_api_key, model=settings.openai_model, **common)
    if settings.openrouter_api_key:
        model = settings.openrouter_model or DEFAULT_OPENROUTER_MODEL
        logger.info("Using OpenRouter model %s", model)
        return OpenRouterVisionClient(settings.openrouter_api_key, model=model, **common)

    logger.warning("No model API key configured; photo analysis and content generation are disabled")
    return None
