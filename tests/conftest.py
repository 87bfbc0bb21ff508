from __future__ import annotations

import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.app import VehicleCheckApp
from backend.app.api import CheckApiHandler
from backend.app.models import Vehicle
from frontend.api import CheckApiClient
from frontend.notifications import ToastQueue


@pytest.fixture()
def app() -> VehicleCheckApp:
    return VehicleCheckApp.create()


@pytest.fixture()
def seeded_app(app: VehicleCheckApp) -> VehicleCheckApp:
    app.seed_defaults()
    return app


@pytest.fixture()
def vehicle(seeded_app: VehicleCheckApp) -> Vehicle:
    vehicles = seeded_app.list_vehicles()
    assert vehicles, "Seed should provide vehicles"
    return vehicles[0]


@pytest.fixture()
def transport(seeded_app: VehicleCheckApp) -> httpx.MockTransport:
    return httpx.MockTransport(CheckApiHandler(seeded_app))


@pytest.fixture()
def api_client(transport: httpx.MockTransport) -> CheckApiClient:
    return CheckApiClient("http://testserver/api", transport=transport)


@pytest.fixture()
def toasts() -> ToastQueue:
    return ToastQueue()
