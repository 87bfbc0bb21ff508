from __future__ import annotations

import math
from typing import Any, Collection, Dict, List, Optional

from .models import CHECK_ITEM_KEYS, Check, CheckItem, CheckItemKey, CheckStatus, ValidationErrorDetail

NOTE_MAX_LENGTH = 300


class CheckValidationError(ValueError):
    def __init__(self, details: List[ValidationErrorDetail]) -> None:
        super().__init__("; ".join(detail.message for detail in details))
        self.details = details


def validate_check(payload: Dict[str, Any], known_vehicle_ids: Collection[str]) -> Check:
    """Validate a submitted check body, reporting every offending field at once."""
    details: List[ValidationErrorDetail] = []

    vehicle_id = payload.get("vehicleId")
    if not isinstance(vehicle_id, str) or not vehicle_id.strip():
        details.append(ValidationErrorDetail("vehicleId", "is required"))
    elif vehicle_id not in known_vehicle_ids:
        details.append(ValidationErrorDetail("vehicleId", "unknown vehicle"))

    odometer = _coerce_odometer(payload.get("odometerKm"), details)
    items = _coerce_items(payload.get("items"), details)

    note = payload.get("note")
    if note is not None:
        if not isinstance(note, str):
            details.append(ValidationErrorDetail("note", "must be a string"))
        elif len(note) > NOTE_MAX_LENGTH:
            details.append(ValidationErrorDetail("note", f"must be {NOTE_MAX_LENGTH} characters or fewer"))
        else:
            note = note.strip() or None

    if details:
        raise CheckValidationError(details)
    return Check(vehicle_id=vehicle_id, odometer_km=odometer, items=items, note=note)


def _coerce_odometer(value: Any, details: List[ValidationErrorDetail]) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        details.append(ValidationErrorDetail("odometerKm", "must be a number"))
        return math.nan
    try:
        number = float(value)
    except OverflowError:
        number = math.nan
    if not math.isfinite(number):
        details.append(ValidationErrorDetail("odometerKm", "must be a number"))
        return math.nan
    if number <= 0:
        details.append(ValidationErrorDetail("odometerKm", "must be positive"))
    return number


def _coerce_items(value: Any, details: List[ValidationErrorDetail]) -> tuple[CheckItem, ...]:
    if not isinstance(value, list) or not all(isinstance(entry, dict) for entry in value):
        details.append(ValidationErrorDetail("items", "must list each checklist item exactly once"))
        return ()

    keys = [entry.get("key") for entry in value]
    expected = {key.value for key in CHECK_ITEM_KEYS}
    if (
        len(keys) != len(CHECK_ITEM_KEYS)
        or not all(isinstance(key, str) for key in keys)
        or set(keys) != expected
    ):
        details.append(ValidationErrorDetail("items", "must list each checklist item exactly once"))
        return ()

    statuses: Dict[CheckItemKey, CheckStatus] = {}
    for entry in value:
        key = CheckItemKey(entry["key"])
        status = _coerce_status(entry.get("status"))
        if status is None:
            details.append(ValidationErrorDetail(f"items.{key.value}", "status must be OK or FAIL"))
            continue
        statuses[key] = status
    return tuple(CheckItem(key, statuses[key]) for key in CHECK_ITEM_KEYS if key in statuses)


def _coerce_status(value: Any) -> Optional[CheckStatus]:
    try:
        return CheckStatus(value)
    except ValueError:
        return None
