from unittest.mock import MagicMock, patch

import pytest

from query_wizard.core.exceptions import ConfigError, ProviderError
from query_wizard.core.providers import (DEFAULT_GOOGLE_MODEL,
                                         GoogleProvider,
                                         OpenAICompatibleProvider)
from query_wizard.models.models import ApiProvider, ApiSettings


def make_response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


@patch("query_wizard.core.providers.genai.Client")
def test_google_uses_explicit_key_and_model(mock_client_cls):
    mock_client = mock_client_cls.return_value
    mock_client.models.generate_content.return_value = MagicMock(text="锂离子电池")

    provider = GoogleProvider(default_api_key="env_key")
    settings = ApiSettings(api_key="user_key", model_name="gemini-custom")

    assert provider.send("prompt", settings) == "锂离子电池"
    mock_client_cls.assert_called_once_with(api_key="user_key")
    mock_client.models.generate_content.assert_called_once_with(model="gemini-custom", contents="prompt")


@patch("query_wizard.core.providers.genai.Client")
def test_google_falls_back_to_default_key_and_model(mock_client_cls):
    mock_client = mock_client_cls.return_value
    mock_client.models.generate_content.return_value = MagicMock(text="ok")

    provider = GoogleProvider(default_api_key="env_key")

    assert provider.send("prompt") == "ok"
    mock_client_cls.assert_called_once_with(api_key="env_key")
    mock_client.models.generate_content.assert_called_once_with(model=DEFAULT_GOOGLE_MODEL, contents="prompt")


@patch("query_wizard.core.providers.genai.Client")
def test_google_returns_empty_string_when_no_text(mock_client_cls):
    mock_client_cls.return_value.models.generate_content.return_value = MagicMock(text=None)

    assert GoogleProvider(default_api_key="key").send("prompt") == ""


@patch("query_wizard.core.providers.genai.Client")
def test_google_without_any_key_raises_before_network(mock_client_cls):
    with pytest.raises(ConfigError):
        GoogleProvider().send("prompt", ApiSettings(provider=ApiProvider.GOOGLE))

    mock_client_cls.assert_not_called()


@patch("query_wizard.core.providers.requests.post")
def test_openai_builds_request(mock_post):
    mock_post.return_value = make_response(
        json_data={"choices": [{"message": {"content": "TS=(\"x\")"}}]}
    )
    settings = ApiSettings(
        provider=ApiProvider.OPENAI_COMPATIBLE,
        api_key="sk-test",
        base_url="https://llm.example.com/v1/",
        model_name="gpt-4o",
    )

    result = OpenAICompatibleProvider(timeout=15).send("hello", settings)

    assert result == "TS=(\"x\")"
    args, kwargs = mock_post.call_args
    assert args[0] == "https://llm.example.com/v1/chat/completions"
    assert kwargs["json"] == {
        "model": "gpt-4o",
        "messages": [{"role": "user", "content": "hello"}],
        "temperature": 0.7,
    }
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["timeout"] == 15


@patch("query_wizard.core.providers.requests.post")
def test_openai_defaults_base_url(mock_post):
    mock_post.return_value = make_response(json_data={"choices": [{"message": {"content": "x"}}]})

    OpenAICompatibleProvider().send("hello", ApiSettings(provider=ApiProvider.OPENAI_COMPATIBLE, api_key="k"))

    assert mock_post.call_args[0][0] == "https://api.openai.com/v1/chat/completions"


@patch("query_wizard.core.providers.requests.post")
def test_openai_http_error_raises_provider_error(mock_post):
    mock_post.return_value = make_response(status_code=401, text='{"error": "invalid api key"}')
    settings = ApiSettings(provider=ApiProvider.OPENAI_COMPATIBLE, api_key="bad", base_url="https://x/v1")

    with pytest.raises(ProviderError) as exc_info:
        OpenAICompatibleProvider().send("hello", settings)

    assert exc_info.value.status_code == 401
    assert "invalid api key" in exc_info.value.body
    assert "HTTP 401" in str(exc_info.value)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"choices": []},
        {"choices": ["oops"]},
        {"choices": [{"message": None}]},
        {"choices": [{"message": {"content": None}}]},
        ["not", "a", "dict"],
        ValueError("not json"),
    ],
)
@patch("query_wizard.core.providers.requests.post")
def test_openai_malformed_success_returns_empty_string(mock_post, payload):
    mock_post.return_value = make_response(json_data=payload)
    settings = ApiSettings(provider=ApiProvider.OPENAI_COMPATIBLE, api_key="k")

    assert OpenAICompatibleProvider().send("hello", settings) == ""
