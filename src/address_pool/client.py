"""HTTP client used by vehicle lifecycle services to talk to the address pool."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from address_pool.domain.address import PostalAddress
from address_pool.domain.shared.errors import AllocationError, InvalidCoordinate

logger = logging.getLogger(__name__)

MAPS_PATH = "/maps"


class AddressClient:
    """Synchronous client for ``GET``/``DELETE /maps``.

    A 404 is an expected outcome (pool exhausted, nothing to release) and is
    returned as ``None``/``False``; a 400 raises :class:`InvalidCoordinate`
    and any other error status raises :class:`AllocationError`.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:9191",
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "AddressClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get_address(self, vehicle_id: int, lat: float, lon: float) -> PostalAddress | None:
        response = self._client.get(MAPS_PATH, params={"lat": lat, "lon": lon, "vehicleId": vehicle_id})
        if response.status_code == 404:
            logger.info("client.address_unavailable", extra={"vehicle_id": vehicle_id})
            return None
        if response.status_code == 400:
            raise InvalidCoordinate(lat, lon)
        self._raise_for_status(response)
        body = response.json()
        return PostalAddress(
            address=body["address"], city=body["city"], state=body["state"], zip=body["zip"]
        )

    def release(self, vehicle_id: int) -> bool:
        response = self._client.delete(MAPS_PATH, params={"vehicleId": vehicle_id})
        if response.status_code == 404:
            return False
        self._raise_for_status(response)
        return int(response.json()) > 0

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            body = response.json()
        except ValueError:
            body = {}
        code = body.get("error", "HTTP_ERROR") if isinstance(body, dict) else "HTTP_ERROR"
        error = AllocationError(
            f"Address service returned {response.status_code}.",
            details={"status": response.status_code, "error": code},
        )
        error.status_code = response.status_code
        raise error


__all__ = ["AddressClient"]
