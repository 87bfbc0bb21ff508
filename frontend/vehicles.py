from __future__ import annotations

import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from backend.app.models import Vehicle

logger = logging.getLogger(__name__)

VehicleFetcher = Callable[[], Awaitable[List[Vehicle]]]


class DirectoryStatus(str, Enum):
    PENDING = "pending"
    LOADED = "loaded"
    FAILED = "failed"


class VehicleDirectory:
    """Read-only list of selectable vehicles, fetched on a best-effort basis."""

    def __init__(self, fetch: VehicleFetcher) -> None:
        self._fetch = fetch
        self.vehicles: tuple[Vehicle, ...] = ()
        self.status = DirectoryStatus.PENDING
        self.load_error: Optional[str] = None

    async def load(self) -> tuple[Vehicle, ...]:
        # A failed load leaves the form usable with only the placeholder option.
        try:
            vehicles = await self._fetch()
        except Exception as exc:
            logger.error("Failed to load vehicles: %s", exc, exc_info=True)
            self.vehicles = ()
            self.status = DirectoryStatus.FAILED
            self.load_error = str(exc) or exc.__class__.__name__
            return self.vehicles
        self.vehicles = tuple(vehicles)
        self.status = DirectoryStatus.LOADED
        self.load_error = None
        return self.vehicles

    def get(self, vehicle_id: str) -> Optional[Vehicle]:
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def __iter__(self):
        return iter(self.vehicles)

    def __len__(self) -> int:
        return len(self.vehicles)
