from httpx import AsyncClient
from sqlalchemy import text

URL = "/api/v1/childcare-logs"

SCHEDULE = [
    {
        "time": "등원 및 통합보육",
        "startTime": "09:00",
        "endTime": "10:00",
        "activity": "자유 놀이",
        "execution": "o",
        "fixed": True,
    },
    {
        "time": "오전간식 (09:00 ~ 09:30)",
        "startTime": "10:00",
        "endTime": "10:30",
        "activity": "간식",
    },
]


async def test_upsert_creates_then_updates_single_row(
    client: AsyncClient, class_id: int, test_db
):
    payload = {"classId": class_id, "date": "2024-09-02", "keywords": " 블록놀이 "}

    first = await client.post(URL, json=payload)
    assert first.status_code == 201
    assert first.json()["keywords"] == "블록놀이"
    assert first.json()["evaluation"] == ""
    assert first.json()["supportPlan"] == ""

    second = await client.post(URL, json={**payload, "evaluation": "즐거웠다"})
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["evaluation"] == "즐거웠다"

    count = await test_db.execute(
        text("SELECT COUNT(*) FROM childcare_logs WHERE class_id = :id"), {"id": class_id}
    )
    assert count.scalar_one() == 1


async def test_save_normalizes_labels_and_keeps_schedule(client: AsyncClient, class_id: int):
    response = await client.post(
        URL, json={"classId": class_id, "date": "2024-09-02", "schedule": SCHEDULE}
    )

    assert response.status_code == 201
    schedule = response.json()["schedule"]
    assert schedule[0]["time"] == "등원 및 통합보육 (09:00 ~ 10:00)"
    assert schedule[1]["time"] == "오전간식 (10:00 ~ 10:30)"
    assert schedule[1]["execution"] == ""

    # Omitting the schedule on update leaves the stored one alone.
    update = await client.post(
        URL, json={"classId": class_id, "date": "2024-09-02", "keywords": "산책"}
    )
    assert update.status_code == 200
    assert len(update.json()["schedule"]) == 2


async def test_save_validation_codes(client: AsyncClient, class_id: int):
    base = {"classId": class_id, "date": "2024-09-02"}
    cases = [
        ({"date": "2024-09-02"}, "MISSING_CLASS_ID"),
        ({"classId": class_id}, "MISSING_DATE"),
        ({**base, "classId": "abc"}, "INVALID_CLASS_ID"),
        ({**base, "date": "02-09-2024"}, "INVALID_DATE_FORMAT"),
        ({**base, "date": "2024-02-30"}, "INVALID_DATE"),
        ({**base, "date": "２０２４-09-02"}, "INVALID_DATE_FORMAT"),
        ({**base, "schedule": "09:00 등원"}, "INVALID_SCHEDULE_FORMAT"),
        ({**base, "schedule": ["등원"]}, "INVALID_ACTIVITY_FORMAT"),
        ({**base, "schedule": [{"activity": "놀이"}]}, "MISSING_ACTIVITY_TIME"),
        ({**base, "schedule": [{"time": "등원"}]}, "MISSING_ACTIVITY_NAME"),
        (
            {**base, "schedule": [{"time": "등원", "activity": "놀이", "startTime": "9시"}]},
            "INVALID_TIME_FORMAT",
        ),
        (
            {**base, "schedule": [{"time": "등원", "activity": "놀이", "startTime": "０9:00"}]},
            "INVALID_TIME_FORMAT",
        ),
        (
            {**base, "schedule": [{"time": "등원", "activity": "놀이", "execution": "y"}]},
            "INVALID_EXECUTION",
        ),
    ]
    for payload, code in cases:
        response = await client.post(URL, json=payload)
        assert response.status_code == 400, payload
        assert response.json()["code"] == code, payload


async def test_save_unknown_class(client: AsyncClient):
    response = await client.post(URL, json={"classId": 77, "date": "2024-09-02"})

    assert response.status_code == 404
    assert response.json()["code"] == "CLASS_NOT_FOUND"


async def test_list_and_weekly_ordering(client: AsyncClient, class_id: int):
    for day in ("2024-09-03", "2024-09-01", "2024-09-02", "2024-09-09"):
        await client.post(URL, json={"classId": class_id, "date": day})

    listing = await client.get(URL, params={"classId": class_id})
    assert [log["date"] for log in listing.json()] == [
        "2024-09-09",
        "2024-09-03",
        "2024-09-02",
        "2024-09-01",
    ]

    weekly = await client.get(
        f"{URL}/weekly", params={"startDate": "2024-09-01", "endDate": "2024-09-07"}
    )
    assert weekly.status_code == 200
    assert [log["date"] for log in weekly.json()] == ["2024-09-01", "2024-09-02", "2024-09-03"]

    by_date = await client.get(f"{URL}/2024-09-02", params={"classId": class_id})
    assert [log["date"] for log in by_date.json()] == ["2024-09-02"]


async def test_weekly_requires_valid_range(client: AsyncClient):
    missing = await client.get(f"{URL}/weekly", params={"endDate": "2024-09-07"})
    assert missing.json()["code"] == "MISSING_START_DATE"

    bad_format = await client.get(
        f"{URL}/weekly", params={"startDate": "2024-9-1", "endDate": "2024-09-07"}
    )
    assert bad_format.json()["code"] == "INVALID_START_DATE_FORMAT"

    reversed_range = await client.get(
        f"{URL}/weekly", params={"startDate": "2024-09-08", "endDate": "2024-09-07"}
    )
    assert reversed_range.status_code == 400
    assert reversed_range.json()["code"] == "INVALID_DATE_RANGE"


async def test_evaluation_content_round_trip(client: AsyncClient, class_id: int):
    missing_log = await client.get(f"{URL}/2024-09-02/evaluation")
    assert missing_log.status_code == 404
    assert missing_log.json()["code"] == "LOG_NOT_FOUND"

    created = await client.post(
        f"{URL}/2024-09-02/evaluation", json={"evaluationContent": "오늘은 블록놀이를 했다."}
    )
    assert created.status_code == 201
    assert created.json()["keywords"] == "Generated evaluation"
    assert created.json()["supportPlan"] == "Generated support plan"

    updated = await client.post(
        f"{URL}/2024-09-02/evaluation",
        json={"classId": class_id, "evaluationContent": "수정된 평가"},
    )
    assert updated.status_code == 200

    fetched = await client.get(f"{URL}/2024-09-02/evaluation")
    assert fetched.json() == {"evaluationContent": "수정된 평가"}

    empty = await client.post(f"{URL}/2024-09-02/evaluation", json={"evaluationContent": " "})
    assert empty.json()["code"] == "MISSING_EVALUATION_CONTENT"


async def test_evaluation_without_classes(client: AsyncClient):
    response = await client.get(f"{URL}/2024-09-02/evaluation")

    assert response.status_code == 400
    assert response.json()["code"] == "NO_CLASSES_FOUND"


async def test_schedule_defaults_to_template(client: AsyncClient, class_id: int):
    response = await client.get(f"{URL}/2024-09-02/schedule", params={"classId": class_id})

    assert response.status_code == 200
    body = response.json()
    assert body["saved"] is False
    assert body["classId"] == class_id
    assert len(body["schedule"]) == 10
    assert body["schedule"][0]["time"] == "등원 및 통합보육 (09:00 ~ 10:00)"
    assert all(row["fixed"] for row in body["schedule"])


async def test_schedule_edits_are_saved_and_templated(client: AsyncClient, class_id: int):
    response = await client.post(
        f"{URL}/2024-09-02/schedule/edits",
        json={
            "classId": class_id,
            "operations": [
                {"op": "set_end_time", "index": 0, "value": "09:50"},
                {"op": "add_row"},
                {"op": "set_label", "index": 10, "value": "연장보육"},
                {"op": "set_activity", "index": 10, "value": "자유 놀이"},
                {"op": "set_start_time", "index": 10, "value": "17:00"},
                {"op": "set_end_time", "index": 10, "value": "18:00"},
            ],
        },
    )

    assert response.status_code == 201
    schedule = response.json()["schedule"]
    assert schedule[0]["time"] == "등원 및 통합보육 (09:00 ~ 09:50)"
    assert schedule[1]["startTime"] == "09:50"
    assert schedule[1]["time"] == "오전간식 (09:50 ~ 10:30)"
    assert schedule[10]["time"] == "연장보육 (17:00 ~ 18:00)"

    saved = await client.get(f"{URL}/2024-09-02/schedule", params={"classId": class_id})
    assert saved.json()["saved"] is True

    # The next day starts from the adjusted fixed rows.
    next_day = await client.get(f"{URL}/2024-09-03/schedule", params={"classId": class_id})
    assert next_day.json()["schedule"][0]["endTime"] == "09:50"


async def test_schedule_edit_rejects_locked_rows(client: AsyncClient, class_id: int):
    delete = await client.post(
        f"{URL}/2024-09-02/schedule/edits",
        json={"classId": class_id, "operations": [{"op": "delete_row", "index": 0}]},
    )
    assert delete.status_code == 400
    assert delete.json()["code"] == "FIXED_ROW_LOCKED"

    move = await client.post(
        f"{URL}/2024-09-02/schedule/edits",
        json={"classId": class_id, "operations": [{"op": "move_down", "index": 3}]},
    )
    assert move.json()["code"] == "FIXED_ROW_LOCKED"

    unknown = await client.post(
        f"{URL}/2024-09-02/schedule/edits",
        json={"classId": class_id, "operations": [{"op": "shuffle", "index": 0}]},
    )
    assert unknown.json()["code"] == "INVALID_OPERATION"

    out_of_range = await client.post(
        f"{URL}/2024-09-02/schedule/edits",
        json={"classId": class_id, "operations": [{"op": "set_activity", "index": 40, "value": "x"}]},
    )
    assert out_of_range.json()["code"] == "INVALID_ROW_INDEX"

    listing = await client.get(URL, params={"classId": class_id})
    assert listing.json() == []
