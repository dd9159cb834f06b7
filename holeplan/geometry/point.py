"""Geographic point value type."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    """WGS84 coordinate in degrees with an optional elevation in feet."""

    lat: float = Field(
        ..., ge=-90, le=90, validation_alias=AliasChoices("lat", "latitude")
    )
    lng: float = Field(
        ...,
        ge=-180,
        le=180,
        validation_alias=AliasChoices("lng", "lon", "longitude"),
    )
    elevation: Optional[float] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def with_elevation(self, elevation: Optional[float]) -> "GeoPoint":
        if elevation == self.elevation:
            return self
        return self.model_copy(update={"elevation": elevation})


__all__ = ["GeoPoint"]
