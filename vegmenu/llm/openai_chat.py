from __future__ import annotations

import requests
import structlog

from vegmenu.core.config import settings
from vegmenu.core.errors import ExternalAPIError

logger = structlog.get_logger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


def _post_chat_request(
    *,
    headers: dict[str, str],
    payload: dict[str, object],
    timeout: float,
) -> requests.Response:
    response = requests.post(
        OPENAI_CHAT_URL,
        headers=headers,
        json=payload,
        timeout=timeout,
    )
    if response.status_code == 429 or response.status_code >= 500:
        raise ExternalAPIError(
            "openai_chat",
            f"OpenAI Chat error {response.status_code}: {response.text}",
            status_code=response.status_code,
        )
    return response


def is_configured() -> bool:
    return bool(settings.openai_api_key)


def chat_completion(
    prompt: str,
    *,
    model: str | None = None,
    temperature: float = 0.0,
    max_tokens: int = 512,
    json_mode: bool = False,
) -> str:
    """
    Send a single chat completion request to OpenAI API.

    The call is made once with ``settings.llm_timeout``; callers own the
    fallback when it fails.

    Args:
        prompt: The user prompt to send
        model: Model to use (default: from settings.llm_classify_model)
        temperature: Sampling temperature (0.0 for deterministic output)
        max_tokens: Maximum tokens in response
        json_mode: Ask the API to constrain the reply to a JSON object

    Returns:
        The assistant's response text

    Raises:
        RuntimeError: If OpenAI API key is not configured
        ExternalAPIError: If the API request fails
    """
    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY is not configured")

    model = model or settings.llm_classify_model

    headers = {
        "Authorization": f"Bearer {settings.openai_api_key}",
        "Content-Type": "application/json",
    }

    payload: dict[str, object] = {
        "model": model,
        "messages": [
            {"role": "user", "content": prompt},
        ],
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        payload["response_format"] = {"type": "json_object"}

    logger.debug("openai_chat_request", model=model, prompt_length=len(prompt))

    response = _post_chat_request(
        headers=headers,
        payload=payload,
        timeout=settings.llm_timeout,
    )
    response.raise_for_status()

    data = response.json()
    content = data["choices"][0]["message"]["content"]
    if not isinstance(content, str):
        raise ExternalAPIError("openai_chat", "OpenAI Chat returned no text content")

    logger.debug("openai_chat_response", response_length=len(content))

    return content
