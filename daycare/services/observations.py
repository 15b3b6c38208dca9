import json
import math
from collections import Counter
from datetime import date
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.schemas.observations import (
    DOMAIN_VALUES,
    ObservationMetrics,
    ObservationResponse,
    TagCount,
)
from daycare.utils.dates import month_bounds
from daycare.utils.db import iso_timestamp, load_json

OBSERVATION_COLUMNS = (
    "id, child_id, date, time, domain, tags, summary, detail, media, author, "
    "follow_ups, linked_to_report, created_at, updated_at"
)
WEEKS_PER_MONTH = 4.3
TOP_TAG_COUNT = 5


def observation_from_row(row: Any) -> ObservationResponse:
    data = dict(row)
    for column in ("tags", "media", "follow_ups"):
        data[column] = load_json(data[column], default=[])
    data["linked_to_report"] = bool(data["linked_to_report"])
    data["created_at"] = iso_timestamp(data["created_at"])
    data["updated_at"] = iso_timestamp(data["updated_at"])
    return ObservationResponse.model_validate(data)


async def get_observation(db: AsyncSession, observation_id: int) -> ObservationResponse | None:
    result = await db.execute(
        text(f"SELECT {OBSERVATION_COLUMNS} FROM observations WHERE id = :id"),
        {"id": observation_id},
    )
    row = result.mappings().first()
    return observation_from_row(row) if row else None


def like_escape(value: str) -> str:
    """Escape LIKE wildcards so ``value`` matches only itself."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _filters(
    child_id: int,
    month: str | None,
    domain: str | None,
    tags: list[str],
    search: str | None,
) -> tuple[str, dict[str, Any]]:
    conditions = ["child_id = :child_id"]
    params: dict[str, Any] = {"child_id": child_id}
    if month:
        first, last = month_bounds(month)
        conditions.append("date >= :month_start AND date <= :month_end")
        params.update(month_start=first, month_end=last)
    if domain and domain != "all":
        conditions.append("domain = :domain")
        params["domain"] = domain
    if tags:
        # Tags are stored as a JSON array of strings. A tag is present when its
        # JSON-encoded form, quotes included, occurs in the array text.
        tag_conditions = []
        for index, tag in enumerate(tags):
            tag_conditions.append(f"CAST(tags AS TEXT) LIKE :tag_{index} ESCAPE '\\'")
            encoded = json.dumps(tag, ensure_ascii=False)
            params[f"tag_{index}"] = f"%{like_escape(encoded)}%"
        conditions.append(f"({' OR '.join(tag_conditions)})")
    if search:
        conditions.append(
            "(LOWER(summary) LIKE :search ESCAPE '\\' "
            "OR LOWER(COALESCE(detail, '')) LIKE :search ESCAPE '\\')"
        )
        params["search"] = f"%{like_escape(search.lower())}%"
    return " AND ".join(conditions), params


async def search_observations(
    db: AsyncSession,
    *,
    child_id: int,
    month: str | None = None,
    domain: str | None = None,
    tags: list[str] | None = None,
    search: str | None = None,
    limit: int | None = 50,
    offset: int = 0,
) -> tuple[dict[str, int], int, list[ObservationResponse]]:
    """Filtered observations of a child.

    Returns per-day counts and the total over every match, plus one page of
    entries, newest first.
    """
    where, params = _filters(child_id, month, domain, tags or [], search)

    counts_result = await db.execute(
        text(f"""
            SELECT date, COUNT(*) AS count FROM observations
            WHERE {where}
            GROUP BY date
            ORDER BY date
        """),
        params,
    )
    daily_counts = {row["date"]: row["count"] for row in counts_result.mappings().all()}
    total = sum(daily_counts.values())

    paging = ""
    page_params = dict(params, offset=offset)
    if limit is not None:
        paging = "LIMIT :limit OFFSET :offset"
        page_params["limit"] = limit
    entries_result = await db.execute(
        text(f"""
            SELECT {OBSERVATION_COLUMNS} FROM observations
            WHERE {where}
            ORDER BY date DESC, COALESCE(time, '') DESC, id DESC
            {paging}
        """),
        page_params,
    )
    entries = [observation_from_row(row) for row in entries_result.mappings().all()]
    return daily_counts, total, entries


def observation_metrics(
    entries: list[ObservationResponse],
    pinned_ids: set[int],
    *,
    goal: int = 20,
    today: date | None = None,
) -> ObservationMetrics:
    """Dashboard figures for a set of observations.

    Readiness counts each observation and each pinned one toward ``goal``
    and caps at 100.
    """
    total = len(entries)
    domain_counts = {domain: 0 for domain in DOMAIN_VALUES}
    tag_counter: Counter[str] = Counter()
    for entry in entries:
        domain_counts[entry.domain] = domain_counts.get(entry.domain, 0) + 1
        tag_counter.update(entry.tags)

    days_since_last = None
    if entries:
        latest = max(date.fromisoformat(entry.date) for entry in entries)
        days_since_last = ((today or date.today()) - latest).days

    pinned = sum(1 for entry in entries if entry.id in pinned_ids)
    readiness = min(100, math.floor((total + pinned) / goal * 100 + 0.5)) if goal else 0

    return ObservationMetrics(
        total_count=total,
        weekly_average=round(total / WEEKS_PER_MONTH, 1),
        domain_counts=domain_counts,
        top_tags=[
            TagCount(tag=tag, count=count)
            for tag, count in tag_counter.most_common(TOP_TAG_COUNT)
        ],
        days_since_last=days_since_last,
        pinned_count=pinned,
        goal=goal,
        report_readiness=readiness,
    )
