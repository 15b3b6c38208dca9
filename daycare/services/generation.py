"""Text generation for activity plans, daily evaluations and child observations.

Each generator builds a Korean prompt, makes one call to the configured model
and parses what comes back. A failed call or an empty answer is raised as
``ExternalServiceError``; nothing is retried or partially accepted.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Union

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.config import settings
from daycare.exceptions import ExternalServiceError
from daycare.prompts import activity_plan as activity_plan_prompt
from daycare.prompts import child_observation as child_observation_prompt
from daycare.prompts import evaluation as evaluation_prompt
from daycare.services.activity_plans import find_plan_covering, insert_plan
from daycare.services.childcare_logs import get_log
from daycare.utils.dates import shift_date, week_ranges
from daycare.utils.llm import LLMMessage, get_completion

logger = structlog.get_logger()

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 8192

JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
EVALUATION_SECTION_RE = re.compile(
    r"^\*\*평가 및 지원계획:\*\*\s*([\s\S]*?)(?=^\*\*아동관찰:\*\*|\Z)", re.MULTILINE
)
CHILD_OBSERVATION_SECTION_RE = re.compile(r"^\*\*아동관찰:\*\*\s*([\s\S]*)\Z", re.MULTILINE)


@dataclass
class Parsed:
    plan: list[Any]


@dataclass
class Unparseable:
    raw: str


PlanParseResult = Union[Parsed, Unparseable]


def parse_activity_plan(text: str) -> PlanParseResult:
    """Read the model's weekly plan.

    The whole answer is tried as JSON first, then the first ``[...]`` span in
    it. Anything that does not yield a JSON array is ``Unparseable``.
    """
    try:
        plan = json.loads(text)
    except ValueError:
        match = JSON_ARRAY_RE.search(text)
        if not match:
            return Unparseable(raw=text)
        try:
            plan = json.loads(match.group(0))
        except ValueError:
            return Unparseable(raw=text)

    if not isinstance(plan, list):
        return Unparseable(raw=text)
    return Parsed(plan=plan)


def extract_evaluation_section(text: str) -> str:
    """The evaluation-and-support-plan section, or the whole text without the header."""
    match = EVALUATION_SECTION_RE.search(text)
    if not match:
        return text.strip()
    return match.group(1).strip()


def extract_child_observation_section(text: str) -> str:
    match = CHILD_OBSERVATION_SECTION_RE.search(text)
    return match.group(1).strip() if match else ""


async def _generate(prompt: str, system_prompt: str, kind: str) -> str:
    if not settings.GEMINI_API_KEY:
        logger.error("Generation requested without an API key", kind=kind)
        raise ExternalServiceError("AI service configuration error", service="llm")

    try:
        response = await get_completion(
            ai_model=settings.LLM_MODEL,
            messages=[LLMMessage(role="user", content=prompt)],
            system_prompt=system_prompt,
            temperature=DEFAULT_TEMPERATURE,
            max_tokens=DEFAULT_MAX_TOKENS,
            api_key=settings.GEMINI_API_KEY,
            max_attempts=1,
        )
    except Exception as e:
        logger.error("Generation call failed", kind=kind, error=str(e))
        raise ExternalServiceError(
            "Failed to generate content due to AI service error", service="llm"
        )

    content = response.content if isinstance(response.content, str) else str(response.content)
    if not content.strip():
        logger.error("Generation returned no content", kind=kind)
        raise ExternalServiceError("AI service returned empty content", service="llm")

    logger.info("Generation completed", kind=kind, usage=response.usage)
    return content.strip()


async def generate_activity_plan(
    db: AsyncSession,
    *,
    class_id: int,
    theme: str,
    start_date: str,
    end_date: str,
    age_group: str,
) -> dict[str, Any]:
    """Generate a weekly plan for the period and store it for the class.

    An unreadable answer is stored as an empty plan and reported with
    ``parsed`` set to False.
    """
    weeks = week_ranges(start_date, end_date)
    prompt = activity_plan_prompt.build_prompt(theme, start_date, end_date, age_group, weeks)
    text = await _generate(prompt, activity_plan_prompt.system_prompt, "activity_plan")

    result = parse_activity_plan(text)
    if isinstance(result, Parsed):
        plan = result.plan
    else:
        logger.warning(
            "Generated activity plan could not be parsed",
            class_id=class_id,
            raw_length=len(result.raw),
        )
        plan = []

    stored = await insert_plan(
        db,
        class_id=class_id,
        theme=theme,
        start_date=start_date,
        end_date=end_date,
        age=age_group,
        plans=plan,
    )
    await db.commit()

    return {
        "plan": plan,
        "parsed": isinstance(result, Parsed),
        "weeks": weeks,
        "activity_plan_id": stored.id,
    }


def _describe_plan(plans: list[Any]) -> str:
    return ", ".join(
        json.dumps(plan, ensure_ascii=False) if isinstance(plan, (dict, list)) else str(plan)
        for plan in plans
    )


async def evaluation_context(db: AsyncSession, class_id: int, date: str) -> tuple[str, str]:
    """Yesterday's support plan and tomorrow's planned activities for the class."""
    previous_log = await get_log(db, class_id, shift_date(date, -1))
    previous_plan = previous_log.support_plan if previous_log else ""

    tomorrow = shift_date(date, 1)
    tomorrow_plan = ""
    covering = await find_plan_covering(db, class_id, tomorrow)
    if covering and covering.plans:
        tomorrow_plan = _describe_plan(covering.plans)
    if not tomorrow_plan:
        tomorrow_log = await get_log(db, class_id, tomorrow)
        tomorrow_plan = tomorrow_log.support_plan if tomorrow_log else ""

    return previous_plan, tomorrow_plan


async def generate_evaluation(
    db: AsyncSession, *, class_id: int, keywords: str, date: str, age_group: str
) -> dict[str, str]:
    previous_plan, tomorrow_plan = await evaluation_context(db, class_id, date)
    prompt = evaluation_prompt.build_prompt(keywords, age_group, previous_plan, tomorrow_plan)
    text = await _generate(prompt, evaluation_prompt.system_prompt, "evaluation")
    return {
        "evaluation": text,
        "evaluation_section": extract_evaluation_section(text),
        "child_observation_section": extract_child_observation_section(text),
    }


async def generate_child_observation(
    *,
    child_name: str,
    age_group: str,
    keywords: str,
    curriculum: str,
    date: str | None = None,
) -> str:
    prompt = child_observation_prompt.build_prompt(
        child_name, age_group, keywords, curriculum, date
    )
    return await _generate(prompt, child_observation_prompt.system_prompt, "child_observation")
