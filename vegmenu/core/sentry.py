from __future__ import annotations

import re
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from vegmenu.core.config import settings

SECRET_PATTERNS = (
    re.compile(r"Bearer\s+[A-Za-z0-9._\-]+"),
    re.compile(r"\bsk-[A-Za-z0-9_\-]{8,}"),
    re.compile(r"(api[-_]?key[\"']?\s*[:=]\s*[\"']?)[^\s\"',]+", re.IGNORECASE),
)


def mask_secrets(text: str | None) -> str | None:
    """Mask API keys and bearer tokens in text."""
    if text is None:
        return None
    text = SECRET_PATTERNS[0].sub("Bearer [REDACTED]", text)
    text = SECRET_PATTERNS[1].sub("[API_KEY_REDACTED]", text)
    text = SECRET_PATTERNS[2].sub(r"\1[REDACTED]", text)
    return text


def before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Filter and sanitize Sentry events before sending."""
    if "request" in hint:
        request = hint["request"]
        if hasattr(request, "headers"):
            request_id = request.headers.get("x-request-id")
            if request_id:
                event.setdefault("tags", {})["request_id"] = request_id

    if "exception" in event:
        for exception in event["exception"].get("values", []):
            if "value" in exception:
                exception["value"] = mask_secrets(exception["value"])

    if "breadcrumbs" in event:
        for breadcrumb in event["breadcrumbs"].get("values", []):
            if "message" in breadcrumb:
                breadcrumb["message"] = mask_secrets(breadcrumb["message"])
            if "data" in breadcrumb:
                for key, value in breadcrumb["data"].items():
                    if isinstance(value, str):
                        breadcrumb["data"][key] = mask_secrets(value)

    return event


def init_sentry() -> None:
    """Initialize Sentry error tracking when a DSN is configured."""
    if not settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment or settings.environment,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=None,
                event_level=None,
            ),
        ],
        traces_sample_rate=0.1,
        before_send=before_send,
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )

    sentry_sdk.set_tag("service", settings.app_name)
    sentry_sdk.set_tag("environment", settings.environment)
