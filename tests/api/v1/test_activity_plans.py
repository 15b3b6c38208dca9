from httpx import AsyncClient

URL = "/api/v1/activity-plans"

PLAN_ENTRY = {
    "week": 1,
    "area": "신체운동·건강",
    "name": "공 굴리기",
    "content": "친구와 공을 주고받는다",
    "materials": "공",
}


def plan_payload(class_id: int, **overrides) -> dict:
    payload = {
        "classId": class_id,
        "theme": "가을",
        "startDate": "2024-10-01",
        "endDate": "2024-10-31",
        "age": "3-5",
        "plans": [PLAN_ENTRY],
    }
    payload.update(overrides)
    return payload


async def test_create_and_list_plans(client: AsyncClient, class_id: int):
    response = await client.post(URL, json=plan_payload(class_id, theme="  가을  "))

    assert response.status_code == 201
    plan = response.json()
    assert plan["theme"] == "가을"
    assert plan["plans"] == [PLAN_ENTRY]

    listing = await client.get(URL, params={"classId": class_id})
    assert [p["id"] for p in listing.json()] == [plan["id"]]


async def test_list_plans_class_id_handling(client: AsyncClient, class_id: int):
    await client.post(URL, json=plan_payload(class_id))

    not_a_number = await client.get(URL, params={"classId": "abc"})
    assert not_a_number.status_code == 400
    assert not_a_number.json()["code"] == "INVALID_CLASS_ID"

    superscript = await client.get(URL, params={"classId": "²"})
    assert superscript.status_code == 400
    assert superscript.json()["code"] == "INVALID_CLASS_ID"

    unknown = await client.get(URL, params={"classId": 999})
    assert unknown.status_code == 200
    assert unknown.json() == []


async def test_list_plans_sorting_and_paging(client: AsyncClient, class_id: int):
    for theme in ("나", "가", "다"):
        await client.post(URL, json=plan_payload(class_id, theme=theme))

    ascending = await client.get(URL, params={"sort": "theme", "order": "asc"})
    assert [p["theme"] for p in ascending.json()] == ["가", "나", "다"]

    page = await client.get(URL, params={"sort": "theme", "order": "asc", "limit": 1, "offset": 1})
    assert [p["theme"] for p in page.json()] == ["나"]

    bad_sort = await client.get(URL, params={"sort": "id"})
    assert bad_sort.json()["code"] == "INVALID_SORT"
    bad_order = await client.get(URL, params={"order": "up"})
    assert bad_order.json()["code"] == "INVALID_ORDER"
    bad_limit = await client.get(URL, params={"limit": 0})
    assert bad_limit.json()["code"] == "INVALID_LIMIT"


async def test_create_plan_rejects_missing_plan_field(client: AsyncClient, class_id: int):
    entry = {key: value for key, value in PLAN_ENTRY.items() if key != "materials"}

    response = await client.post(URL, json=plan_payload(class_id, plans=[entry]))

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_PLAN_FIELD"


async def test_create_plan_validation_codes(client: AsyncClient, class_id: int):
    cases = [
        ({"classId": None}, "MISSING_CLASS_ID"),
        ({"classId": "one"}, "INVALID_CLASS_ID_TYPE"),
        ({"theme": ""}, "INVALID_THEME"),
        ({"startDate": None}, "INVALID_START_DATE"),
        ({"startDate": "2024/10/01"}, "INVALID_START_DATE_FORMAT"),
        ({"endDate": "31-10-2024"}, "INVALID_END_DATE_FORMAT"),
        ({"age": " "}, "INVALID_AGE"),
        ({"plans": []}, "INVALID_PLANS"),
        ({"plans": ["week 1"]}, "INVALID_PLAN_STRUCTURE"),
        ({"startDate": "2024-11-01"}, "INVALID_DATE_RANGE"),
    ]
    for overrides, code in cases:
        response = await client.post(URL, json=plan_payload(class_id, **overrides))
        assert response.status_code == 400, overrides
        assert response.json()["code"] == code, overrides


async def test_create_plan_unknown_class(client: AsyncClient):
    response = await client.post(URL, json=plan_payload(42))

    assert response.status_code == 400
    assert response.json()["code"] == "CLASS_NOT_FOUND"


async def test_update_plan_checks_merged_range(client: AsyncClient, class_id: int):
    plan = (await client.post(URL, json=plan_payload(class_id))).json()

    updated = await client.put(URL, params={"id": plan["id"]}, json={"theme": "겨울"})
    assert updated.status_code == 200
    assert updated.json()["theme"] == "겨울"

    reversed_range = await client.put(
        URL, params={"id": plan["id"]}, json={"endDate": "2024-09-01"}
    )
    assert reversed_range.status_code == 400
    assert reversed_range.json()["code"] == "INVALID_DATE_RANGE"

    missing = await client.put(URL, params={"id": 999}, json={"theme": "겨울"})
    assert missing.status_code == 404
    assert missing.json()["code"] == "PLAN_NOT_FOUND"


async def test_delete_plan(client: AsyncClient, class_id: int):
    plan = (await client.post(URL, json=plan_payload(class_id))).json()

    response = await client.delete(URL, params={"id": plan["id"]})

    assert response.status_code == 200
    assert response.json()["deletedRecord"]["id"] == plan["id"]
    assert (await client.get(URL)).json() == []

    invalid = await client.delete(URL, params={"id": "x"})
    assert invalid.json()["code"] == "INVALID_ID"
