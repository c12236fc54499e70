import json
import re
from typing import Any, Dict, Optional, Tuple

REQUIRED_SECTIONS = ("push_day", "pull_day", "legs_day", "diet_plan")

UNPARSED = "AI response could not be parsed. Please try again."

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


class PlanParseError(ValueError):
    pass


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned))
    return cleaned


def is_complete_plan(obj: Any) -> bool:
    return isinstance(obj, dict) and all(obj.get(section) for section in REQUIRED_SECTIONS)


def parse_plan(text: str) -> Dict[str, Any]:
    """Parse a model reply into a plan dict.

    Tries the fence-stripped reply first, then the span from the first '{'
    to the last '}'. Raises PlanParseError when neither yields a complete plan.
    """
    try:
        obj = json.loads(strip_code_fences(text))
    except ValueError as e:
        first_error = f"Failed to parse AI response as JSON: {e}"
    else:
        if is_complete_plan(obj):
            return obj
        first_error = "Invalid plan structure"

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        try:
            obj = json.loads(text[start:end + 1])
        except ValueError:
            obj = None
        if is_complete_plan(obj):
            return obj

    raise PlanParseError(first_error)


def fallback_plan() -> Dict[str, Any]:
    """Placeholder plan with the full shape, returned when parsing fails"""
    exercise = [{"name": UNPARSED, "sets": "N/A", "rest": "N/A"}]
    return {
        "push_day": {"exercises": list(exercise)},
        "pull_day": {"exercises": list(exercise)},
        "legs_day": {"exercises": list(exercise)},
        "cardio_HIIT": {"routine": [UNPARSED], "weekly_frequency": "N/A"},
        "fst7_day": {"target_muscle": "N/A", "routine": [UNPARSED]},
        "diet_plan": {
            "type": "N/A",
            "breakfast": [UNPARSED],
            "lunch": [UNPARSED],
            "snacks": [UNPARSED],
            "dinner": [UNPARSED],
        },
        "supplements": [UNPARSED],
        "additional_recommendations": [UNPARSED],
    }


def plan_from_reply(text: str) -> Tuple[Dict[str, Any], Optional[str]]:
    """(plan, None) on success, (fallback plan, error message) otherwise"""
    try:
        return parse_plan(text), None
    except PlanParseError as e:
        return fallback_plan(), str(e)
