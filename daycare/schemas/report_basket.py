from typing import Any

from pydantic import field_validator

from daycare.schemas.common import CamelModel, CamelRequest, fail, require_id
from daycare.schemas.observations import ObservationResponse


class PinRequest(CamelRequest):
    observation_id: Any = None

    @field_validator("observation_id", mode="before")
    @classmethod
    def check_observation_id(cls, v):
        return require_id(
            v, "observationId", missing="MISSING_OBSERVATION_ID", invalid="INVALID_OBSERVATION_ID"
        )


class ReorderRequest(CamelRequest):
    from_index: Any = None
    to_index: Any = None

    @field_validator("from_index", "to_index", mode="before")
    @classmethod
    def check_index(cls, v, info):
        if isinstance(v, bool) or not isinstance(v, int):
            raise fail("INVALID_INDEX", f"{info.field_name} must be an integer")
        return v


class PinnedObservation(CamelModel):
    order: int
    observation: ObservationResponse


class ReportBasketResponse(CamelModel):
    items: list[PinnedObservation]
