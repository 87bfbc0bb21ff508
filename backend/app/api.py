from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Callable, Optional

import httpx

from .app import VehicleCheckApp
from .forms import CheckValidationError

API_PREFIX = "/api"


class CheckApiHandler:
    """Maps ``httpx`` requests onto the check service; mount it with ``httpx.MockTransport``."""

    def __init__(self, service: VehicleCheckApp, *, prefix: str = API_PREFIX) -> None:
        self.service = service
        self.prefix = prefix.rstrip("/")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        return self.handle(request)

    def handle(self, request: httpx.Request) -> httpx.Response:
        handler = self._match_route(request)
        if not handler:
            return self._error(HTTPStatus.NOT_FOUND, "Not found")
        return handler(request)

    # Routing --------------------------------------------------------------------
    def _match_route(self, request: httpx.Request) -> Optional[Callable[[httpx.Request], httpx.Response]]:
        routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {
            ("GET", f"{self.prefix}/vehicles"): self._list_vehicles,
            ("POST", f"{self.prefix}/checks"): self._create_check,
        }
        return routes.get((request.method, request.url.path.rstrip("/")))

    # Route handlers -------------------------------------------------------------
    def _list_vehicles(self, request: httpx.Request) -> httpx.Response:
        vehicles = [vehicle.to_payload() for vehicle in self.service.list_vehicles()]
        return httpx.Response(HTTPStatus.OK, json=vehicles)

    def _create_check(self, request: httpx.Request) -> httpx.Response:
        try:
            payload = json.loads(request.content or b"null")
        except ValueError:
            return self._error(HTTPStatus.BAD_REQUEST, "Request body must be valid JSON")
        if not isinstance(payload, dict):
            return self._error(HTTPStatus.BAD_REQUEST, "Request body must be a JSON object")
        try:
            record = self.service.submit_check(payload)
        except CheckValidationError as exc:
            return self._error(
                HTTPStatus.BAD_REQUEST,
                "Validation failed",
                details=[detail.to_payload() for detail in exc.details],
            )
        return httpx.Response(HTTPStatus.CREATED, json=record.to_payload())

    @staticmethod
    def _error(status: HTTPStatus, message: str, *, details: Optional[list[dict[str, Any]]] = None) -> httpx.Response:
        error: dict[str, Any] = {"message": message}
        if details is not None:
            error["details"] = details
        return httpx.Response(status, json={"error": error})


def create_transport(service: Optional[VehicleCheckApp] = None) -> httpx.MockTransport:
    if service is None:
        service = VehicleCheckApp.create()
        service.seed_defaults()
    return httpx.MockTransport(CheckApiHandler(service))
