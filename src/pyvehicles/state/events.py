"""Results of position updates applied to the store."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from pyvehicles.models.vehicle import Vehicle


class PositionOutcome(StrEnum):
    UPDATED = "updated"
    CREATED_IMPLICITLY = "created_implicitly"


class PositionUpdate(BaseModel):
    """What a position report did to the store.

    ``previous`` is the vehicle as stored before the report, or ``None``
    when the report created the vehicle.
    """

    model_config = ConfigDict(frozen=True)

    outcome: PositionOutcome
    vehicle: Vehicle
    previous: Vehicle | None = None

    @property
    def created_implicitly(self) -> bool:
        return self.outcome == PositionOutcome.CREATED_IMPLICITLY
