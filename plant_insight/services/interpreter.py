"""
Response Interpreter
Turns the model's free-form reply into either a structured plant analysis or
an unstructured fallback that keeps the full original text, and derives the
total yield summary when the farmer stated a land area.
"""
import json
import logging
import math
import re
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from ..models import DerivedYieldSummary, FailureResult

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = "Could not parse structured data"
DEFAULT_YIELD_UNIT = "units"
NO_PRICE_REVENUE_NOTE = "Contact local markets for current prices"

_FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class Structured(BaseModel):
    data: Dict[str, Any]


class Unstructured(BaseModel):
    raw_text: str


ParseOutcome = Union[Structured, Unstructured]


def extract_json_fragment(text: str) -> str:
    """Return the inner content of the first fenced block, or the whole text."""
    match = _FENCED_BLOCK_RE.search(text or "")
    fragment = match.group(1) if match else (text or "")
    return fragment.strip()


def parse_reply(text: str) -> ParseOutcome:
    fragment = extract_json_fragment(text)
    try:
        data = json.loads(fragment)
    except ValueError as e:
        logger.warning("Failed to parse AI response as JSON: %s", e)
        return Unstructured(raw_text=text)
    if not isinstance(data, dict):
        logger.warning("AI response JSON is a %s, expected an object", type(data).__name__)
        return Unstructured(raw_text=text)
    return Structured(data=data)


def leading_number(value: Any) -> float:
    """Leading numeric portion of a value ('50-60 quintals' -> 50.0); 0.0 if none."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER_RE.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(1))
    return number if math.isfinite(number) else 0.0


def usable_acres(value: Any) -> Optional[float]:
    """Land area as a positive finite float, or None when it cannot be used."""
    if value is None or isinstance(value, bool):
        return None
    try:
        acres = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(acres) or acres <= 0:
        return None
    return acres


def derive_yield_summary(analysis: Dict[str, Any], acres: Optional[float]) -> Optional[DerivedYieldSummary]:
    if acres is None:
        return None
    estimate = analysis.get("yieldEstimate")
    if not isinstance(estimate, dict) or estimate.get("perAcre") is None:
        return None

    unit = estimate.get("unit") or DEFAULT_YIELD_UNIT
    total = leading_number(estimate.get("perAcre")) * acres
    market_price = estimate.get("marketPrice")
    if market_price:
        revenue = f"Based on {market_price} per {unit}"
    else:
        revenue = NO_PRICE_REVENUE_NOTE

    return DerivedYieldSummary(
        acres=int(acres) if acres.is_integer() else acres,
        totalYield=f"{total:.2f} {unit}",
        estimatedRevenue=revenue,
    )


def interpret_reply(text: str, acres: Optional[float] = None) -> Dict[str, Any]:
    """Return either the failure payload or the analysis (+ totalYieldEstimate)."""
    outcome = parse_reply(text)
    if isinstance(outcome, Unstructured):
        return FailureResult(error=PARSE_FAILURE_MESSAGE, rawResponse=outcome.raw_text).model_dump()

    result = dict(outcome.data)
    # drop error keys the model echoed back
    result.pop("error", None)
    result.pop("rawResponse", None)
    summary = derive_yield_summary(result, acres)
    if summary is not None:
        result["totalYieldEstimate"] = summary.model_dump()
    return result
