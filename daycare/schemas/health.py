from typing import Literal

from daycare.schemas.common import CamelModel

Status = Literal["healthy", "unhealthy"]


class HealthCheck(CamelModel):
    status: Status
    database_status: Status
    environment: str
