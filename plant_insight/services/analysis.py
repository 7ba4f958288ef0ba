"""
Plant analysis pipeline.

One request runs Validating -> Prompting -> Invoking -> Interpreting and
either returns a response body or raises a `PlantAnalysisError`. Nothing is
shared between requests.
"""
import logging
from datetime import date
from typing import Any, Dict, Optional

import httpx

from ..errors import MissingImageError
from ..models import AnalysisRequest
from .gateway import invoke_completion, require_api_key
from .images import normalize_image_payload
from .interpreter import interpret_reply, usable_acres
from .prompts import build_messages

logger = logging.getLogger(__name__)


def validate_request(payload: Any) -> AnalysisRequest:
    """Check the body carries an image; land area is passed through as-is."""
    if not isinstance(payload, dict):
        raise MissingImageError()
    image = payload.get("imageBase64")
    if not isinstance(image, str) or not image.strip():
        raise MissingImageError()
    return AnalysisRequest(image=normalize_image_payload(image), land_area_acres=payload.get("acres"))


async def analyze_plant(payload: Any, client: httpx.AsyncClient, today: Optional[date] = None) -> Dict[str, Any]:
    req = validate_request(payload)
    api_key = require_api_key()

    acres = usable_acres(req.land_area_acres)
    if req.land_area_acres is not None and acres is None:
        logger.info("Ignoring unusable land area %r", req.land_area_acres)

    logger.info("Analyzing plant image (acres=%s)", acres)
    messages = build_messages(req.image, acres=acres, today=today)

    reply = await invoke_completion(client, messages, api_key)
    logger.info("AI response received (%d chars)", len(reply))

    result = interpret_reply(reply, acres=acres)
    if "error" in result:
        logger.info("Returning unstructured AI response")
    return result
