from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from daycare.api.v1.endpoints import health


async def test_health_check(client: AsyncClient):
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "databaseStatus": "healthy",
        "environment": "local",
    }


async def test_health_check_without_database(client: AsyncClient, monkeypatch):
    async def unreachable(db):
        return False

    monkeypatch.setattr(health, "database_reachable", unreachable)

    response = await client.get("/api/v1/health")

    assert response.status_code == 503
    assert response.json()["databaseStatus"] == "unhealthy"


async def test_probe_reports_driver_errors(test_db):
    class BrokenSession:
        async def execute(self, statement):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    assert await health.database_reachable(BrokenSession()) is False
    assert await health.database_reachable(test_db) is True
