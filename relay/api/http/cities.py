"""Proxy endpoint serving a trimmed, map-ready view of a cities dataset."""

from fastapi import APIRouter

from relay.dependencies import CitiesManagerDep
from relay.schemas.city import CityModel
from relay.schemas.response import ErrorResponseModel
from relay.utils.error_handler import handle_http_errors

router = APIRouter(prefix="/api", tags=["cities"])


@router.get(
    "/cities",
    response_model=list[CityModel],
    responses={500: {"model": ErrorResponseModel}},
    summary="First cities of the upstream dataset",
)
@handle_http_errors
async def cities(manager: CitiesManagerDep) -> list[CityModel]:
    """
    Fetch the upstream dataset and return its first records.

    Each record is returned as
    `{name, latLng: {lat, lng}, population, width}` with
    `width = ceil(ln(population) * 2)`. Upstream timeouts, HTTP errors and
    undecodable data produce a 500 with the error message.
    """
    return await manager.get_cities()
