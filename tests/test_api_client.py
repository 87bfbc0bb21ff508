from __future__ import annotations

import httpx
import pytest

from backend.app import VehicleCheckApp
from backend.app.models import Check, ValidationErrorDetail, Vehicle
from frontend.api import ApiError, CheckApiClient, parse_error_body
from frontend.checklist import default_items


@pytest.mark.asyncio
async def test_get_vehicles(api_client: CheckApiClient, seeded_app: VehicleCheckApp) -> None:
    async with api_client:
        vehicles = await api_client.get_vehicles()
    assert vehicles == seeded_app.list_vehicles()
    assert all(isinstance(vehicle, Vehicle) for vehicle in vehicles)


@pytest.mark.asyncio
async def test_get_vehicles_rejects_malformed_records() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[{"id": "veh-1"}]))
    async with CheckApiClient("http://testserver/api", transport=transport) as client:
        with pytest.raises(ApiError):
            await client.get_vehicles()


@pytest.mark.asyncio
async def test_create_check_returns_accepted_record(api_client: CheckApiClient, vehicle: Vehicle) -> None:
    check = Check(vehicle_id=vehicle.id, odometer_km=1200.0, items=default_items(), note="ok")
    async with api_client:
        body = await api_client.create_check(check)
    assert body["vehicleId"] == vehicle.id
    assert body["note"] == "ok"
    assert body["id"]


@pytest.mark.asyncio
async def test_create_check_raises_structured_error(api_client: CheckApiClient, vehicle: Vehicle) -> None:
    check = Check(vehicle_id=vehicle.id, odometer_km=-1.0, items=default_items())
    async with api_client:
        with pytest.raises(ApiError) as exc_info:
            await api_client.create_check(check)
    error = exc_info.value
    assert error.status_code == 400
    assert error.is_validation_error
    assert error.details == (ValidationErrorDetail("odometerKm", "must be positive"),)


@pytest.mark.asyncio
async def test_transport_failure_raises_api_error_without_details() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    async with CheckApiClient("http://testserver/api", transport=httpx.MockTransport(refuse)) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.get_vehicles()
    assert exc_info.value.details == ()
    assert exc_info.value.status_code is None


def test_parse_error_body_shapes() -> None:
    assert parse_error_body(None) == (None, ())
    assert parse_error_body({"error": "nope"}) == (None, ())
    assert parse_error_body({"error": {"message": "boom"}}) == ("boom", ())
    assert parse_error_body({"error": {"details": "odometerKm"}}) == (None, ())
    assert parse_error_body(
        {"error": {"details": [{"field": "note", "reason": "too long"}, {"field": "items"}, "junk"]}}
    ) == (None, (ValidationErrorDetail("note", "too long"),))


@pytest.mark.asyncio
async def test_unreadable_detail_entries_still_mark_validation_error() -> None:
    body = {"error": {"details": [{"field": "odometerKm"}]}}
    transport = httpx.MockTransport(lambda request: httpx.Response(400, json=body))
    check = Check(vehicle_id="veh-1", odometer_km=10.0, items=default_items())
    async with CheckApiClient("http://testserver/api", transport=transport) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.create_check(check)
    assert exc_info.value.details == ()
    assert exc_info.value.has_details
    assert exc_info.value.is_validation_error
