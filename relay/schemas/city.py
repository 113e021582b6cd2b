import math

from pydantic import BaseModel, ConfigDict, Field


class RawCityModel(BaseModel):  # type: ignore[misc]
    """
    City record as published by the upstream dataset.

    Coordinates arrive as strings (e.g. "42.50729") and are coerced to
    floats; unknown keys (country, admin1, ...) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    lat: float
    lng: float
    population: int | float


class LatLngModel(BaseModel):  # type: ignore[misc]
    lat: float
    lng: float


class CityModel(BaseModel):  # type: ignore[misc]
    """
    City as served by GET /api/cities.

    Attributes:
        name: City name.
        lat_lng: Coordinates, serialized as `latLng`.
        population: Population copied from the upstream record.
        width: Marker width, ceil(ln(population) * 2).
    """

    name: str
    lat_lng: LatLngModel = Field(serialization_alias="latLng")
    population: int | float
    width: int

    @classmethod
    def from_raw(cls, raw: RawCityModel) -> "CityModel":
        """
        Transform an upstream record.

        Raises:
            ValueError: If population is not strictly positive.
        """
        if raw.population <= 0:
            raise ValueError(
                f"City {raw.name!r} has non-positive population "
                f"{raw.population}"
            )

        return cls(
            name=raw.name,
            lat_lng=LatLngModel(lat=raw.lat, lng=raw.lng),
            population=raw.population,
            width=math.ceil(math.log(raw.population) * 2),
        )
