import asyncio
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from relay.exceptions import UpstreamFetchFailure
from relay.logging import logger
from relay.schemas.city import CityModel, RawCityModel
from relay.settings import app_settings
from relay.utils.metrics import upstream_fetch_total

_raw_cities_adapter = TypeAdapter(list[RawCityModel])


class CitiesManager:
    """
    Client for the public cities dataset.

    Downloads the dataset under a bounded wait, keeps the first records and
    turns them into map-ready CityModel instances. Any failure along the
    way is reported as UpstreamFetchFailure.
    """

    def __init__(
        self,
        url: str | None = None,
        limit: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            url: Dataset URL, defaults to CITIES_URL.
            limit: Number of records kept, defaults to CITIES_LIMIT.
            timeout: Overall wait bound in seconds, defaults to
                CITIES_FETCH_TIMEOUT_SECONDS.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self.url = url or app_settings.CITIES_URL
        self.limit = limit if limit is not None else app_settings.CITIES_LIMIT
        self.timeout = (
            timeout
            if timeout is not None
            else app_settings.CITIES_FETCH_TIMEOUT_SECONDS
        )
        self.transport = transport

    async def fetch_raw(self) -> list[Any]:
        """
        Download the dataset and return the decoded JSON array.

        Raises:
            UpstreamFetchFailure: On timeout, transport error, non-2xx
                status or a body that is not a JSON array.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                # httpx timeouts are per phase, this bounds the whole fetch
                response = await asyncio.wait_for(
                    client.get(
                        self.url, headers={"Accept": "application/json"}
                    ),
                    timeout=self.timeout,
                )
        except (httpx.TimeoutException, TimeoutError) as ex:
            raise UpstreamFetchFailure(
                f"Request timed out after {self.timeout}s"
            ) from ex
        except httpx.HTTPError as ex:
            raise UpstreamFetchFailure(str(ex) or type(ex).__name__) from ex

        if not response.is_success:
            raise UpstreamFetchFailure(
                f"HTTP error! status: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as ex:
            raise UpstreamFetchFailure(f"Invalid JSON: {ex}") from ex

        if not isinstance(data, list):
            raise UpstreamFetchFailure("Expected a JSON array of cities")

        return data

    async def get_cities(self) -> list[CityModel]:
        """
        Fetch the dataset and transform its first `limit` records.

        Returns:
            list[CityModel]: Transformed cities.

        Raises:
            UpstreamFetchFailure: If fetching, decoding or transforming
                fails.
        """
        try:
            raw = await self.fetch_raw()
            cities = [
                CityModel.from_raw(city)
                for city in _raw_cities_adapter.validate_python(
                    raw[: self.limit]
                )
            ]
        except UpstreamFetchFailure:
            upstream_fetch_total.labels(
                upstream="cities", outcome="failure"
            ).inc()
            raise
        except (ValidationError, ValueError) as ex:
            upstream_fetch_total.labels(
                upstream="cities", outcome="failure"
            ).inc()
            raise UpstreamFetchFailure(f"Invalid city record: {ex}") from ex

        upstream_fetch_total.labels(upstream="cities", outcome="success").inc()
        logger.debug(f"Fetched {len(cities)} cities from {self.url}")
        return cities
