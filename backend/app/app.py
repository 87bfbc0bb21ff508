from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from .forms import validate_check
from .models import CheckRecord, CheckStatus, Vehicle

logger = logging.getLogger(__name__)


@dataclass
class VehicleCheckApp:
    """In-memory check service backing the vehicle list and check submission endpoints."""

    vehicles: Dict[str, Vehicle] = field(default_factory=dict)
    checks: List[CheckRecord] = field(default_factory=list)

    @classmethod
    def create(cls) -> "VehicleCheckApp":
        return cls()

    def seed_defaults(self) -> None:
        vehicle_definitions = [
            ("veh-001", "AB12 CDE", "Ford", "Transit", 2019),
            ("veh-002", "FG34 HIJ", "Vauxhall", "Vivaro", 2021),
            ("veh-003", "KL56 MNO", "Mercedes-Benz", "Sprinter", 2018),
            ("veh-004", "PQ78 RST", "Volkswagen", "Crafter", 2022),
        ]
        for vehicle_id, registration, make, model, year in vehicle_definitions:
            if vehicle_id not in self.vehicles:
                self.add_vehicle(
                    vehicle_id=vehicle_id,
                    registration=registration,
                    make=make,
                    model=model,
                    year=year,
                )

    # Vehicle operations
    def list_vehicles(self) -> List[Vehicle]:
        return list(self.vehicles.values())

    def add_vehicle(self, *, vehicle_id: str, registration: str, make: str, model: str, year: int) -> Vehicle:
        if vehicle_id in self.vehicles:
            raise ValueError("Vehicle identifier already exists")
        vehicle = Vehicle(id=vehicle_id, registration=registration, make=make, model=model, year=year)
        self.vehicles[vehicle_id] = vehicle
        return vehicle

    # Check operations
    def submit_check(self, payload: Dict[str, Any]) -> CheckRecord:
        check = validate_check(payload, self.vehicles.keys())
        record = CheckRecord(
            id=uuid.uuid4().hex,
            check=check,
            created_at=datetime.now(timezone.utc),
        )
        self.checks.append(record)
        failed = [item.key.value for item in check.items if item.status is CheckStatus.FAIL]
        logger.info("Accepted check %s for vehicle %s (failed items: %s)", record.id, check.vehicle_id, failed or "none")
        return record

    def list_checks(self) -> List[CheckRecord]:
        return list(self.checks)
