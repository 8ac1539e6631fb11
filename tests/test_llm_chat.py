from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from vegmenu.core.errors import ExternalAPIError


def test_chat_completion_raises_without_api_key() -> None:
    """Test that chat_completion raises RuntimeError without API key."""
    with patch("vegmenu.llm.openai_chat.settings") as mock_settings:
        mock_settings.openai_api_key = None

        from vegmenu.llm import openai_chat

        with pytest.raises(RuntimeError, match="OPENAI_API_KEY is not configured"):
            openai_chat.chat_completion("test prompt")


def test_chat_completion_success() -> None:
    """Test successful chat completion request."""
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = {
        "choices": [{"message": {"content": "Test response"}}]
    }
    mock_response.raise_for_status = MagicMock()

    with patch("vegmenu.llm.openai_chat.settings") as mock_settings:
        mock_settings.openai_api_key = "test-api-key"
        mock_settings.llm_classify_model = "gpt-4o-mini"
        mock_settings.llm_timeout = 5.0

        with patch(
            "vegmenu.llm.openai_chat.requests.post", return_value=mock_response
        ) as mock_post:
            from vegmenu.llm.openai_chat import chat_completion

            result = chat_completion("test prompt")

    assert result == "Test response"
    payload = mock_post.call_args.kwargs["json"]
    assert payload["model"] == "gpt-4o-mini"
    assert "response_format" not in payload
    assert mock_post.call_args.kwargs["timeout"] == 5.0


def test_chat_completion_json_mode() -> None:
    """Test that json_mode asks the API for a JSON object."""
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = {
        "choices": [
            {
                "message": {
                    "content": '{"is_vegetarian": true, "confidence": 0.9, "reasoning": "Rice", "flags": []}'
                }
            }
        ]
    }

    with patch("vegmenu.llm.openai_chat.settings") as mock_settings:
        mock_settings.openai_api_key = "test-api-key"
        mock_settings.llm_classify_model = "gpt-4o-mini"
        mock_settings.llm_timeout = 5.0

        with patch(
            "vegmenu.llm.openai_chat.requests.post", return_value=mock_response
        ) as mock_post:
            from vegmenu.llm.openai_chat import chat_completion

            result = chat_completion("Is risotto vegetarian?", json_mode=True)

    assert "is_vegetarian" in result
    assert mock_post.call_args.kwargs["json"]["response_format"] == {"type": "json_object"}


def test_chat_completion_does_not_retry_server_errors() -> None:
    """Test that a 5xx is raised after a single attempt."""
    mock_response = MagicMock()
    mock_response.status_code = 503
    mock_response.text = "overloaded"

    with patch("vegmenu.llm.openai_chat.settings") as mock_settings:
        mock_settings.openai_api_key = "test-api-key"
        mock_settings.llm_classify_model = "gpt-4o-mini"
        mock_settings.llm_timeout = 5.0

        with patch(
            "vegmenu.llm.openai_chat.requests.post", return_value=mock_response
        ) as mock_post:
            from vegmenu.llm.openai_chat import chat_completion

            with pytest.raises(ExternalAPIError) as excinfo:
                chat_completion("test prompt")

    assert excinfo.value.status_code == 503
    assert excinfo.value.service == "openai_chat"
    assert mock_post.call_count == 1
