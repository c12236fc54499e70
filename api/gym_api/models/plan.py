from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional


class WellnessFormData(BaseModel):
    """Profile submitted to the AI planner.

    Every field is optional at the schema level; required fields are checked
    by the handler after the rate limit has been applied. Accepts both
    snake_case and camelCase keys.
    """
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    fitness_goal: Optional[str] = None
    lifestyle: Optional[str] = None
    medical_conditions: Optional[str] = None
    diet_preference: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class GeneratePlanResponse(BaseModel):
    plan: Dict[str, Any]
    raw_content: Optional[str] = None
    parse_error: Optional[str] = None
