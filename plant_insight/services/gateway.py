"""
AI Gateway Completion Service
Sends the assembled prompt to an OpenAI-compatible multimodal chat-completion
endpoint and returns the reply text. One attempt per call: no retry, no
streaming. Callers wanting resilience retry above this layer.
"""
import logging
import os
from typing import Any, Dict, List, Optional, Type

import httpx

from ..errors import (
    MalformedUpstreamResponseError,
    NotConfiguredError,
    PlantAnalysisError,
    QuotaExceededError,
    RateLimitedError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_GATEWAY_MODEL = "google/gemini-2.5-flash"
DEFAULT_GATEWAY_TIMEOUT = 60.0

# Upstream status -> error raised to the caller. Anything else non-2xx is UpstreamError.
STATUS_ERRORS: Dict[int, Type[PlantAnalysisError]] = {
    429: RateLimitedError,
    402: QuotaExceededError,
}


def get_gateway_api_key() -> str:
    """Get the AI gateway credential from the environment.

    AI_GATEWAY_API_KEY wins; LOVABLE_API_KEY is accepted for existing deployments.
    """
    return (os.getenv("AI_GATEWAY_API_KEY", "") or os.getenv("LOVABLE_API_KEY", "") or "").strip()


def get_gateway_url() -> str:
    return os.getenv("AI_GATEWAY_URL", "") or DEFAULT_GATEWAY_URL


def get_gateway_model() -> str:
    return os.getenv("AI_GATEWAY_MODEL", "") or DEFAULT_GATEWAY_MODEL


def get_gateway_timeout() -> float:
    raw = os.getenv("AI_GATEWAY_TIMEOUT", "")
    if not raw:
        return DEFAULT_GATEWAY_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid AI_GATEWAY_TIMEOUT=%r, using %ss", raw, DEFAULT_GATEWAY_TIMEOUT)
        return DEFAULT_GATEWAY_TIMEOUT


def require_api_key() -> str:
    api_key = get_gateway_api_key()
    if not api_key:
        logger.error("AI gateway API key not configured (set AI_GATEWAY_API_KEY)")
        raise NotConfiguredError()
    return api_key


def build_payload(messages: List[Dict[str, Any]], model: Optional[str] = None) -> Dict[str, Any]:
    return {
        "model": model or get_gateway_model(),
        "messages": messages,
    }


def classify_status(status_code: int, body: str) -> PlantAnalysisError:
    """Map a non-success upstream status to the error raised to the caller."""
    error_cls = STATUS_ERRORS.get(status_code)
    if error_cls is not None:
        return error_cls()
    return UpstreamError(upstream_status=status_code, upstream_body=body)


def extract_reply_text(data: Any) -> str:
    """Return choices[0].message.content from an OpenAI-style completion."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise MalformedUpstreamResponseError(detail="missing choices[0].message.content")
    if not isinstance(content, str):
        raise MalformedUpstreamResponseError(detail=f"content is {type(content).__name__}, expected str")
    return content


async def invoke_completion(
    client: httpx.AsyncClient,
    messages: List[Dict[str, Any]],
    api_key: str,
    url: Optional[str] = None,
    model: Optional[str] = None,
) -> str:
    """POST the messages to the gateway and return the raw reply text."""
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    payload = build_payload(messages, model=model)
    target = url or get_gateway_url()

    try:
        response = await client.post(target, json=payload, headers=headers)
    except httpx.HTTPError as e:
        logger.error("AI gateway request failed: %s", e)
        raise UpstreamError(detail=str(e))

    logger.info("AI gateway responded with status %s", response.status_code)
    if not response.is_success:
        error = classify_status(response.status_code, response.text)
        if isinstance(error, UpstreamError):
            logger.error("AI gateway error: %s %s", response.status_code, response.text[:1000])
        else:
            logger.warning("AI gateway refused request: %s (%s)", response.status_code, error.kind)
        raise error

    try:
        data = response.json()
    except ValueError:
        logger.error("AI gateway returned non-JSON body: %s", response.text[:500])
        raise MalformedUpstreamResponseError(upstream_status=response.status_code, upstream_body=response.text, detail="non-JSON body")

    return extract_reply_text(data)
