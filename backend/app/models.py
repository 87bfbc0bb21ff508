from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class CheckItemKey(str, Enum):
    TYRES = "TYRES"
    BRAKES = "BRAKES"
    LIGHTS = "LIGHTS"
    OIL = "OIL"
    COOLANT = "COOLANT"


CHECK_ITEM_KEYS: tuple[CheckItemKey, ...] = tuple(CheckItemKey)


class CheckStatus(str, Enum):
    OK = "OK"
    FAIL = "FAIL"


@dataclass(frozen=True)
class Vehicle:
    id: str
    registration: str
    make: str
    model: str
    year: int

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Vehicle":
        return cls(
            id=str(payload["id"]),
            registration=str(payload["registration"]),
            make=str(payload["make"]),
            model=str(payload["model"]),
            year=int(payload["year"]),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "registration": self.registration,
            "make": self.make,
            "model": self.model,
            "year": self.year,
        }


@dataclass(frozen=True)
class CheckItem:
    key: CheckItemKey
    status: CheckStatus = CheckStatus.OK

    def to_payload(self) -> Dict[str, str]:
        return {"key": self.key.value, "status": self.status.value}


@dataclass(frozen=True)
class Check:
    vehicle_id: str
    odometer_km: float
    items: tuple[CheckItem, ...]
    note: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        # JSON has no NaN; browsers serialise it as null and so do we.
        odometer = self.odometer_km if math.isfinite(self.odometer_km) else None
        payload: Dict[str, Any] = {
            "vehicleId": self.vehicle_id,
            "odometerKm": odometer,
            "items": [item.to_payload() for item in self.items],
        }
        if self.note is not None:
            payload["note"] = self.note
        return payload


@dataclass(frozen=True)
class ValidationErrorDetail:
    field: str
    reason: str

    @property
    def message(self) -> str:
        return f"{self.field}: {self.reason}"

    def to_payload(self) -> Dict[str, str]:
        return {"field": self.field, "reason": self.reason}


@dataclass
class CheckRecord:
    id: str
    check: Check
    created_at: datetime

    def to_payload(self) -> Dict[str, Any]:
        payload = self.check.to_payload()
        payload["id"] = self.id
        payload["createdAt"] = self.created_at.isoformat()
        return payload
