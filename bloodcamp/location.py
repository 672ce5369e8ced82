"""Device geolocation seam.

Coordinates are captured on the coordinator's device. The service only sees
what the device reported, including a failure reason when the device could
not provide a position."""

from __future__ import annotations

import math
from typing import Protocol

from .errors import LocationUnavailable
from .models import Coordinates


class LocationProvider(Protocol):
    """One-shot asynchronous coordinate fetch"""

    async def get_location(self) -> Coordinates:
        """Return the current position or raise LocationUnavailable"""
        ...


class ReportedLocation:
    """Coordinates as reported by the client device.

    Usage:
        provider = ReportedLocation(latitude=6.52, longitude=3.37)
        coords = await provider.get_location()

        # Device denied access
        provider = ReportedLocation(error="User denied Geolocation")
    """

    def __init__(
        self,
        latitude: float | None = None,
        longitude: float | None = None,
        error: str | None = None,
    ) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.error = error

    async def get_location(self) -> Coordinates:
        if self.error:
            raise LocationUnavailable(f"Could not get location: {self.error}")
        if self.latitude is None or self.longitude is None:
            raise LocationUnavailable("Geolocation is not supported")

        latitude = float(self.latitude)
        longitude = float(self.longitude)
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise LocationUnavailable("Reported coordinates are not valid numbers")
        if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
            raise LocationUnavailable(f"Reported coordinates out of range: ({latitude}, {longitude})")

        return Coordinates(latitude=latitude, longitude=longitude)
