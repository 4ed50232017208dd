import logging
from abc import ABC, abstractmethod
from typing import Any

import requests
from google import genai

from query_wizard.core.exceptions import ConfigError, ProviderError
from query_wizard.models.models import ApiSettings
from query_wizard.utils.constants import APP_LOGGER_NAME

logger = logging.getLogger(f"{APP_LOGGER_NAME}.providers")

DEFAULT_GOOGLE_MODEL = "gemini-3-flash-preview"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENAI_TEMPERATURE = 0.7


class LLMProvider(ABC):
    """プロバイダー非依存の LLM 呼び出しインターフェース"""

    @abstractmethod
    def send(self, prompt: str, settings: ApiSettings | None = None) -> str:
        """プロンプトを1回だけ送信し、応答テキストを返す"""


class GoogleProvider(LLMProvider):
    """google-genai の generate_content を使うアダプター"""

    def __init__(self, default_api_key: str | None = None, default_model: str = DEFAULT_GOOGLE_MODEL):
        self.default_api_key = default_api_key
        self.default_model = default_model

    def send(self, prompt: str, settings: ApiSettings | None = None) -> str:
        api_key = (settings.api_key if settings else None) or self.default_api_key
        if not api_key:
            raise ConfigError("No API key configured for Google Gemini.")

        model_name = (settings.model_name.strip() if settings else "") or self.default_model
        logger.debug(f"Calling Google model {model_name}")

        client = genai.Client(api_key=api_key)
        response = client.models.generate_content(
            model=model_name,
            contents=prompt,
        )
        return response.text or ""


class OpenAICompatibleProvider(LLMProvider):
    """Chat Completions 互換エンドポイントを requests で叩くアダプター"""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout

    def send(self, prompt: str, settings: ApiSettings | None = None) -> str:
        settings = settings or ApiSettings()
        base_url = (settings.base_url or DEFAULT_OPENAI_BASE_URL).rstrip("/")
        endpoint = f"{base_url}/chat/completions"

        body = {
            "model": settings.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": OPENAI_TEMPERATURE,
        }
        logger.debug(f"Calling {endpoint} with model {settings.model_name}")

        response = requests.post(
            endpoint,
            json=body,
            headers={
                "Authorization": f"Bearer {settings.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )
        if not response.ok:
            raise ProviderError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError:
            logger.warning(f"Non-JSON response body from {endpoint}")
            return ""
        return self._extract_message_content(payload)

    @staticmethod
    def _extract_message_content(payload: Any) -> str:
        # 想定外の形式でも例外にせず空文字を返す
        if not isinstance(payload, dict):
            return ""
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if not isinstance(message, dict):
            return ""
        content = message.get("content")
        return content if isinstance(content, str) else ""
