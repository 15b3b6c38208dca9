from datetime import date, timedelta

from httpx import AsyncClient

URL = "/api/v1/observations"


def observation(child_id: int, **overrides) -> dict:
    payload = {
        "childId": child_id,
        "date": "2024-09-02",
        "time": "10:30",
        "domain": "신체",
        "tags": ["대근육"],
        "summary": "미끄럼틀을 혼자 탔다",
        "detail": "계단을 번갈아 오른다",
        "author": "김교사",
    }
    payload.update(overrides)
    return payload


async def test_create_and_fetch_observation(client: AsyncClient, child_id: int):
    response = await client.post(
        URL,
        json=observation(
            child_id,
            media=[{"type": "image", "url": "https://example.com/a.jpg"}],
            followUps=["부모 상담"],
        ),
    )

    assert response.status_code == 201
    created = response.json()
    assert created["linkedToReport"] is False
    assert created["tags"] == ["대근육"]
    assert created["media"][0]["url"] == "https://example.com/a.jpg"
    assert created["followUps"] == ["부모 상담"]

    fetched = await client.get(f"{URL}/{created['id']}")
    assert fetched.json() == created

    missing = await client.get(f"{URL}/999")
    assert missing.status_code == 404
    assert missing.json()["code"] == "OBSERVATION_NOT_FOUND"


async def test_create_validation_codes(client: AsyncClient, child_id: int):
    cases = [
        ({"childId": None}, "MISSING_CHILD_ID"),
        ({"childId": "x"}, "INVALID_CHILD_ID"),
        ({"date": None}, "MISSING_DATE"),
        ({"date": "2024/09/02"}, "INVALID_DATE_FORMAT"),
        ({"time": "24:00"}, "INVALID_TIME_FORMAT"),
        ({"domain": None}, "MISSING_DOMAIN"),
        ({"domain": "수학"}, "INVALID_DOMAIN"),
        ({"summary": None}, "MISSING_SUMMARY"),
        ({"summary": "  "}, "EMPTY_SUMMARY"),
        ({"author": None}, "MISSING_AUTHOR"),
        ({"author": ""}, "EMPTY_AUTHOR"),
        ({"tags": "대근육"}, "INVALID_TAGS_FORMAT"),
        ({"media": [{"type": "image"}]}, "INVALID_MEDIA_FORMAT"),
        ({"followUps": [1]}, "INVALID_FOLLOWUPS_FORMAT"),
        ({"linkedToReport": "yes"}, "INVALID_LINKED_TO_REPORT"),
    ]
    for overrides, code in cases:
        response = await client.post(URL, json=observation(child_id, **overrides))
        assert response.status_code == 400, overrides
        assert response.json()["code"] == code, overrides


async def test_create_for_unknown_child(client: AsyncClient):
    response = await client.post(URL, json=observation(99))

    assert response.status_code == 404
    assert response.json()["code"] == "CHILD_NOT_FOUND"


async def test_list_filters_and_daily_counts(client: AsyncClient, child_id: int):
    await client.post(URL, json=observation(child_id, date="2024-09-02", time="09:00"))
    await client.post(
        URL,
        json=observation(
            child_id, date="2024-09-02", time="11:00", domain="예술", tags=["그리기"]
        ),
    )
    await client.post(
        URL,
        json=observation(
            child_id, date="2024-09-05", domain="사회", tags=["협력"], summary="친구와 나눴다"
        ),
    )
    await client.post(URL, json=observation(child_id, date="2024-10-01"))

    september = await client.get(URL, params={"childId": child_id, "month": "2024-09"})
    body = september.json()
    assert body["totalCount"] == 3
    assert body["dailyCounts"] == {"2024-09-02": 2, "2024-09-05": 1}
    assert [(e["date"], e["time"]) for e in body["entries"]] == [
        ("2024-09-05", "10:30"),
        ("2024-09-02", "11:00"),
        ("2024-09-02", "09:00"),
    ]

    by_domain = await client.get(URL, params={"childId": child_id, "domain": "예술"})
    assert by_domain.json()["totalCount"] == 1

    by_tags = await client.get(URL, params={"childId": child_id, "tags": "그리기,협력"})
    assert by_tags.json()["totalCount"] == 2

    by_search = await client.get(URL, params={"childId": child_id, "search": "나눴"})
    assert [e["domain"] for e in by_search.json()["entries"]] == ["사회"]

    paged = await client.get(URL, params={"childId": child_id, "limit": 1})
    assert paged.json()["totalCount"] == 4
    assert len(paged.json()["entries"]) == 1


async def test_list_parameter_errors(client: AsyncClient, child_id: int):
    assert (await client.get(URL)).json()["code"] == "INVALID_CHILD_ID"
    bad_month = await client.get(URL, params={"childId": child_id, "month": "2024-9"})
    assert bad_month.json()["code"] == "INVALID_MONTH_FORMAT"
    bad_domain = await client.get(URL, params={"childId": child_id, "domain": "수학"})
    assert bad_domain.json()["code"] == "INVALID_DOMAIN"
    unknown_child = await client.get(URL, params={"childId": 99})
    assert unknown_child.status_code == 404


async def test_filters_treat_wildcards_literally(client: AsyncClient, child_id: int):
    await client.post(URL, json=observation(child_id, tags=["ab"], summary="run", detail=None))
    await client.post(
        URL, json=observation(child_id, tags=["대근육"], summary="100% 완주", detail=None)
    )

    async def count(**params) -> int:
        response = await client.get(URL, params={"childId": child_id, **params})
        return response.json()["totalCount"]

    assert await count(search="%") == 1
    assert await count(search="_") == 0
    assert await count(tags="a_") == 0
    assert await count(tags="a%") == 0
    assert await count(tags="a") == 0
    assert await count(tags="ab") == 1
    assert await count(tags="대근") == 0
    assert await count(tags="대근육") == 1


async def test_update_and_delete(client: AsyncClient, child_id: int):
    created = (await client.post(URL, json=observation(child_id))).json()

    updated = await client.put(
        URL, params={"id": created["id"]}, json={"summary": "그네를 탔다", "tags": []}
    )
    assert updated.status_code == 200
    assert updated.json()["summary"] == "그네를 탔다"
    assert updated.json()["tags"] == []
    assert updated.json()["detail"] == created["detail"]

    empty = await client.put(URL, params={"id": created["id"]}, json={"summary": ""})
    assert empty.json()["code"] == "EMPTY_SUMMARY"

    deleted = await client.delete(URL, params={"id": created["id"]})
    assert deleted.status_code == 200
    assert deleted.json()["deleted"]["id"] == created["id"]
    assert (await client.get(f"{URL}/{created['id']}")).status_code == 404


async def test_metrics(client: AsyncClient, child_id: int):
    recent = (date.today() - timedelta(days=3)).isoformat()
    first = (
        await client.post(URL, json=observation(child_id, date=recent, tags=["대근육", "균형"]))
    ).json()
    await client.post(URL, json=observation(child_id, date="2024-09-01", domain="자연"))
    await client.post("/api/v1/report-basket", json={"observationId": first["id"]})

    response = await client.get(f"{URL}/metrics", params={"childId": child_id, "goal": 4})

    assert response.status_code == 200
    metrics = response.json()
    assert metrics["totalCount"] == 2
    assert metrics["weeklyAverage"] == 0.5
    assert metrics["domainCounts"]["신체"] == 1
    assert metrics["domainCounts"]["자연"] == 1
    assert metrics["domainCounts"]["예술"] == 0
    assert metrics["topTags"][0] == {"tag": "대근육", "count": 2}
    assert metrics["daysSinceLast"] == 3
    assert metrics["pinnedCount"] == 1
    assert metrics["goal"] == 4
    assert metrics["reportReadiness"] == 75


async def test_metrics_without_observations(client: AsyncClient, child_id: int):
    metrics = (await client.get(f"{URL}/metrics", params={"childId": child_id})).json()

    assert metrics["totalCount"] == 0
    assert metrics["daysSinceLast"] is None
    assert metrics["reportReadiness"] == 0
    assert metrics["goal"] == 20
