"""
Prompt Builder
Assembles the system instruction (target JSON schema + current month/year)
and the user message (directive text + image) for the AI gateway.
"""
from datetime import date
from typing import Any, Dict, List, Optional

PLANT_ANALYSIS_PROMPT = """You are an expert botanist and agricultural scientist. Analyze the plant image and provide detailed information in the following JSON format. Be accurate and helpful.

Return ONLY valid JSON with this exact structure:
{
  "plantName": "Common name of the plant",
  "scientificName": "Scientific/botanical name",
  "species": "Species type and family",
  "growthDays": "Number of days to fully mature (e.g., '90-120 days')",
  "description": "Brief description of the plant",
  "pests": [
    {
      "name": "Pest name",
      "description": "Brief description of damage caused"
    }
  ],
  "pesticides": [
    {
      "name": "Pesticide name",
      "type": "Organic/Chemical",
      "usage": "How to apply"
    }
  ],
  "fertilizers": [
    {
      "name": "Fertilizer name",
      "type": "Type (e.g., NPK ratio)",
      "timing": "When to apply"
    }
  ],
  "soilRequirements": {
    "type": "Soil type (e.g., Loamy, Sandy)",
    "pH": "Optimal pH range",
    "drainage": "Drainage requirements"
  },
  "seasonInfo": {
    "bestSeasons": ["Season1", "Season2"],
    "currentSeasonSuitable": true/false,
    "reason": "Why it is or isn't suitable now"
  },
  "yieldEstimate": {
    "perAcre": "Expected yield per acre",
    "unit": "Unit of measurement",
    "marketPrice": "Approximate market price per unit",
    "notes": "Additional yield notes"
  },
  "careInstructions": [
    "Care instruction 1",
    "Care instruction 2"
  ],
  "confidence": 0.0 to 1.0
}

If you cannot identify the plant clearly, still provide your best guess with a lower confidence score. Current date for seasonal analysis: {current_period}."""

USER_DIRECTIVE = "Please analyze this plant image and provide detailed agricultural information."


def format_period(today: date) -> str:
    """Render a date as 'October 2026'."""
    return today.strftime("%B %Y")


def format_acres(acres: float) -> str:
    return str(int(acres)) if float(acres).is_integer() else str(acres)


def build_system_prompt(today: Optional[date] = None) -> str:
    today = today or date.today()
    return PLANT_ANALYSIS_PROMPT.replace("{current_period}", format_period(today))


def build_user_text(acres: Optional[float] = None) -> str:
    if acres is None:
        return USER_DIRECTIVE
    return f"{USER_DIRECTIVE} The farmer has {format_acres(acres)} acres of land for cultivation."


def build_messages(image: str, acres: Optional[float] = None, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Return the system + user messages for one analysis request.

    `acres` must already be a usable positive number or None. `today`
    defaults to the date at call time so seasonal guidance tracks the
    actual invocation.
    """
    return [
        {"role": "system", "content": build_system_prompt(today)},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": build_user_text(acres)},
                {"type": "image_url", "image_url": {"url": image}},
            ],
        },
    ]
