from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from loguru import logger

from ..ai import groq
from ..ai.plan import plan_from_reply
from ..ai.prompt import build_plan_prompt
from ..core.dependencies import get_rate_limiter
from ..core.exceptions import BadRequest, QuotaExceeded, ServiceUnavailable
from ..core.rate_limit import DailyRateLimiter, get_client_id
from ..models.plan import GeneratePlanResponse, WellnessFormData

router = APIRouter(prefix="/api", tags=["ai planner"])


@router.post("/generate-plan", response_model=GeneratePlanResponse, response_model_exclude_none=True)
async def generate_plan(
    form: WellnessFormData,
    request: Request,
    limiter: DailyRateLimiter = Depends(get_rate_limiter)
):
    """
    Generate a workout and diet plan with the AI service (10 requests per client per UTC day)
    """
    client_id = get_client_id(request)
    if not limiter.check(client_id):
        raise QuotaExceeded(limiter.limit)

    if not form.name or not form.age or not form.fitness_goal:
        raise BadRequest("Missing required fields: name, age, and fitness_goal are required")

    if form.age < 1 or form.age > 120:
        raise BadRequest("Age must be between 1 and 120")

    api_key = groq.get_api_key()
    if not api_key:
        logger.error("GROQ_API_KEY is not configured")
        raise ServiceUnavailable("AI service is not configured. Please add GROQ_API_KEY to your environment variables.")

    logger.info("Sending plan request to Groq", client=client_id)
    try:
        reply = await run_in_threadpool(groq.chat_completion, api_key, build_plan_prompt(form))
    except groq.GroqError as e:
        raise ServiceUnavailable(f"Failed to generate fitness plan: {e}")

    plan, parse_error = plan_from_reply(reply)
    if parse_error:
        logger.bind(client=client_id).warning(f"Returning fallback plan: {parse_error}")
        return GeneratePlanResponse(plan=plan, raw_content=reply, parse_error=parse_error)

    logger.info("Fitness plan generated successfully", client=client_id)
    return GeneratePlanResponse(plan=plan)
