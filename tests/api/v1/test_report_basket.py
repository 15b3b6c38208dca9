from httpx import AsyncClient

URL = "/api/v1/report-basket"


async def _observation(client: AsyncClient, child_id: int, summary: str) -> int:
    response = await client.post(
        "/api/v1/observations",
        json={
            "childId": child_id,
            "date": "2024-09-02",
            "domain": "신체",
            "summary": summary,
            "author": "김교사",
        },
    )
    return response.json()["id"]


async def test_pin_is_idempotent_and_links_observation(client: AsyncClient, child_id: int):
    observation_id = await _observation(client, child_id, "첫 관찰")

    first = await client.post(URL, json={"observationId": observation_id})
    again = await client.post(URL, json={"observationId": observation_id})

    assert first.status_code == 200
    assert len(again.json()["items"]) == 1
    item = again.json()["items"][0]
    assert item["order"] == 0
    assert item["observation"]["linkedToReport"] is True


async def test_pin_unknown_observation(client: AsyncClient):
    response = await client.post(URL, json={"observationId": 404})

    assert response.status_code == 404
    assert response.json()["code"] == "OBSERVATION_NOT_FOUND"


async def test_reorder_and_unpin(client: AsyncClient, child_id: int):
    ids = [await _observation(client, child_id, f"관찰 {n}") for n in range(3)]
    for observation_id in ids:
        await client.post(URL, json={"observationId": observation_id})

    moved = await client.put(f"{URL}/order", json={"fromIndex": 2, "toIndex": 0})
    assert moved.status_code == 200
    assert [i["observation"]["id"] for i in moved.json()["items"]] == [ids[2], ids[0], ids[1]]
    assert [i["order"] for i in moved.json()["items"]] == [0, 1, 2]

    out_of_range = await client.put(f"{URL}/order", json={"fromIndex": 5, "toIndex": 0})
    assert out_of_range.status_code == 400
    assert out_of_range.json()["code"] == "INVALID_INDEX"

    unpinned = await client.delete(f"{URL}/{ids[0]}")
    assert [i["observation"]["id"] for i in unpinned.json()["items"]] == [ids[2], ids[1]]
    observation = (await client.get(f"/api/v1/observations/{ids[0]}")).json()
    assert observation["linkedToReport"] is False


async def test_deleting_observation_removes_it_from_basket(client: AsyncClient, child_id: int):
    observation_id = await _observation(client, child_id, "삭제될 관찰")
    await client.post(URL, json={"observationId": observation_id})

    await client.delete("/api/v1/observations", params={"id": observation_id})

    assert (await client.get(URL)).json() == {"items": []}
