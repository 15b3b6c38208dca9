from httpx import AsyncClient

URL = "/api/v1/daily-observations"


async def test_create_list_update_delete(client: AsyncClient, class_id: int, child_id: int):
    created = await client.post(
        URL,
        json={
            "classId": class_id,
            "date": "2024-09-02",
            "childId": child_id,
            "observation": "  친구에게 장난감을 양보했다 ",
        },
    )
    assert created.status_code == 201
    assert created.json()["success"] is True
    record_id = created.json()["id"]

    listing = await client.get(URL, params={"date": "2024-09-02", "classId": class_id})
    [row] = listing.json()
    assert row["childName"] == "김민준"
    assert row["observation"] == "친구에게 장난감을 양보했다"

    updated = await client.put(f"{URL}/{record_id}", json={"observation": "블록을 쌓았다"})
    assert updated.json() == {"success": True}
    listing = await client.get(URL, params={"date": "2024-09-02", "classId": class_id})
    assert listing.json()[0]["observation"] == "블록을 쌓았다"

    deleted = await client.delete(f"{URL}/{record_id}")
    assert deleted.json() == {"success": True}
    missing = await client.delete(f"{URL}/{record_id}")
    assert missing.status_code == 404
    assert missing.json()["code"] == "RECORD_NOT_FOUND"


async def test_create_validation_codes(client: AsyncClient, class_id: int, child_id: int):
    base = {
        "classId": class_id,
        "date": "2024-09-02",
        "childId": child_id,
        "observation": "관찰",
    }
    cases = [
        ({**base, "classId": None}, "MISSING_CLASS_ID"),
        ({**base, "classId": str(class_id)}, "INVALID_CLASS_ID_TYPE"),
        ({**base, "date": 20240902}, "INVALID_DATE_TYPE"),
        ({**base, "date": "2024.09.02"}, "INVALID_DATE_FORMAT"),
        ({**base, "date": "2024-13-02"}, "INVALID_DATE"),
        ({**base, "childId": "1"}, "INVALID_CHILD_ID_TYPE"),
        ({**base, "observation": None}, "MISSING_OBSERVATION"),
        ({**base, "observation": 3}, "INVALID_OBSERVATION"),
    ]
    for payload, code in cases:
        response = await client.post(URL, json=payload)
        assert response.status_code == 400, payload
        assert response.json()["code"] == code, payload


async def test_create_requires_existing_parents(client: AsyncClient, class_id: int, child_id: int):
    no_class = await client.post(
        URL,
        json={"classId": 99, "date": "2024-09-02", "childId": child_id, "observation": "x"},
    )
    assert no_class.json()["code"] == "CLASS_NOT_FOUND"

    no_child = await client.post(
        URL,
        json={"classId": class_id, "date": "2024-09-02", "childId": 99, "observation": "x"},
    )
    assert no_child.status_code == 400
    assert no_child.json()["code"] == "CHILD_NOT_FOUND"


async def test_list_requires_date_and_class(client: AsyncClient):
    assert (await client.get(URL, params={"classId": 1})).json()["code"] == "MISSING_DATE"
    assert (await client.get(URL, params={"date": "2024-09-02"})).json()["code"] == (
        "MISSING_CLASS_ID"
    )
    invalid = await client.get(URL, params={"date": "2024-09-02", "classId": "a"})
    assert invalid.json()["code"] == "INVALID_CLASS_ID"
