import json

import pytest
from httpx import AsyncClient

from daycare.config import settings
from daycare.services import generation
from daycare.utils.llm import LLMResponse

PLAN = [
    {"week": 1, "area": "신체운동·건강", "name": "공 굴리기", "content": "공을 굴린다", "materials": "공"},
    {"week": 2, "area": "예술경험", "name": "가을 그림", "content": "낙엽을 그린다", "materials": "크레파스"},
]

EVALUATION_TEXT = (
    "**평가 및 지원계획:**\n블록 놀이에 몰입했다. 내일은 높이 쌓기를 지원한다.\n\n"
    "**아동관찰:**\n민준이는 친구와 블록을 나누었다."
)


class FakeCompletion:
    """Stands in for the model call and remembers the prompts it was given."""

    def __init__(self, content="", error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return LLMResponse(content=self.content, usage={"total_tokens": 10})

    @property
    def prompt(self) -> str:
        return self.calls[-1]["messages"][-1].content


@pytest.fixture
def completion(monkeypatch):
    def install(content="", error=None):
        fake = FakeCompletion(content, error)
        monkeypatch.setattr(generation, "get_completion", fake)
        return fake

    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-key")
    return install


PLAN_REQUEST = {
    "theme": "가을",
    "startDate": "2024-09-02",
    "endDate": "2024-09-15",
    "ageGroup": "3-5",
}


async def test_generate_activity_plan_stores_plan(
    client: AsyncClient, class_id: int, completion
):
    fake = completion(f"계획입니다:\n```json\n{json.dumps(PLAN, ensure_ascii=False)}\n```")

    response = await client.post("/api/v1/generate-activity-plan", json=PLAN_REQUEST)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["parsed"] is True
    assert body["plan"] == PLAN
    assert body["weeks"] == [
        {"week": 1, "start": "2024-09-02", "end": "2024-09-08"},
        {"week": 2, "start": "2024-09-09", "end": "2024-09-15"},
    ]
    assert "가을" in fake.prompt
    assert fake.calls[-1]["max_attempts"] == 1

    stored = await client.get("/api/v1/activity-plans", params={"classId": class_id})
    assert [p["id"] for p in stored.json()] == [body["activityPlanId"]]
    assert stored.json()[0]["plans"] == PLAN


async def test_unreadable_plan_is_stored_empty(client: AsyncClient, class_id: int, completion):
    completion("죄송합니다. 계획을 만들 수 없습니다.")

    response = await client.post(
        "/api/v1/generate-activity-plan", json={**PLAN_REQUEST, "classId": class_id}
    )

    assert response.status_code == 200
    assert response.json()["parsed"] is False
    assert response.json()["plan"] == []
    stored = await client.get("/api/v1/activity-plans", params={"classId": class_id})
    assert stored.json()[0]["plans"] == []


async def test_generate_activity_plan_validation(client: AsyncClient, class_id: int, completion):
    fake = completion("[]")
    cases = [
        ({**PLAN_REQUEST, "theme": " "}, "INVALID_THEME"),
        ({**PLAN_REQUEST, "startDate": "2024/09/02"}, "INVALID_DATE_FORMAT"),
        ({**PLAN_REQUEST, "endDate": "2024-08-01"}, "INVALID_DATE_RANGE"),
        ({**PLAN_REQUEST, "ageGroup": "6-7"}, "INVALID_AGE_GROUP"),
        ({**PLAN_REQUEST, "classId": "1"}, "INVALID_CLASS_ID"),
    ]
    for payload, code in cases:
        response = await client.post("/api/v1/generate-activity-plan", json=payload)
        assert response.status_code == 400, payload
        assert response.json()["code"] == code, payload
    assert fake.calls == []


async def test_generation_needs_a_class(client: AsyncClient, completion):
    completion("[]")

    response = await client.post("/api/v1/generate-activity-plan", json=PLAN_REQUEST)

    assert response.status_code == 400
    assert response.json()["code"] == "NO_CLASSES_FOUND"


async def test_generate_evaluation_uses_neighbouring_days(
    client: AsyncClient, class_id: int, completion
):
    await client.post(
        "/api/v1/childcare-logs",
        json={"classId": class_id, "date": "2024-09-03", "supportPlan": "블록 영역을 넓힌다"},
    )
    await client.post(
        "/api/v1/activity-plans",
        json={
            "classId": class_id,
            "theme": "가을",
            "startDate": "2024-09-02",
            "endDate": "2024-09-08",
            "age": "3-5",
            "plans": PLAN[:1],
        },
    )
    fake = completion(EVALUATION_TEXT)

    response = await client.post(
        "/api/v1/generate-evaluation",
        json={"keywords": "블록, 나누기", "date": "2024-09-04", "ageGroup": "3-5"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["evaluation"] == EVALUATION_TEXT
    assert body["evaluationSection"] == "블록 놀이에 몰입했다. 내일은 높이 쌓기를 지원한다."
    assert body["childObservationSection"] == "민준이는 친구와 블록을 나누었다."
    assert "블록 영역을 넓힌다" in fake.prompt
    assert "공 굴리기" in fake.prompt
    assert "누리과정" in fake.prompt


async def test_generate_evaluation_without_context(client: AsyncClient, class_id: int, completion):
    fake = completion("평가만 있는 답변")

    response = await client.post(
        "/api/v1/generate-evaluation",
        json={"keywords": "모래", "date": "2024-09-04", "ageGroup": "0-2"},
    )

    assert response.json()["evaluationSection"] == "평가만 있는 답변"
    assert response.json()["childObservationSection"] == ""
    assert "이전 계획 정보 없음" in fake.prompt
    assert "표준보육과정" in fake.prompt


async def test_generate_child_observation(client: AsyncClient, completion):
    fake = completion("  민준이는 모래 놀이를 즐겼다.  ")

    response = await client.post(
        "/api/v1/generate-child-observation",
        json={
            "childName": "김민준",
            "ageGroup": "3-5",
            "keywords": "모래, 협동",
            "curriculum": "누리과정",
            "date": "2024-09-04",
        },
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "observation": "민준이는 모래 놀이를 즐겼다."}
    assert "김민준" in fake.prompt

    missing_name = await client.post(
        "/api/v1/generate-child-observation",
        json={"ageGroup": "3-5", "keywords": "모래", "curriculum": "누리과정"},
    )
    assert missing_name.json()["code"] == "INVALID_CHILD_NAME"


@pytest.mark.parametrize(
    "content, error",
    [("", None), ("   ", None), ("", RuntimeError("quota exceeded"))],
    ids=["empty", "blank", "provider-error"],
)
async def test_failed_generation(client: AsyncClient, class_id: int, completion, content, error):
    completion(content, error)

    response = await client.post(
        "/api/v1/generate-evaluation",
        json={"keywords": "블록", "date": "2024-09-04", "ageGroup": "3-5"},
    )

    assert response.status_code == 500
    assert response.json()["code"] == "AI_GENERATION_FAILED"
    assert "quota" not in response.json()["error"]


async def test_generation_without_api_key(client: AsyncClient, class_id: int, monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")

    response = await client.post("/api/v1/generate-activity-plan", json=PLAN_REQUEST)

    assert response.status_code == 500
    assert response.json()["code"] == "AI_GENERATION_FAILED"
    assert (await client.get("/api/v1/activity-plans")).json() == []
