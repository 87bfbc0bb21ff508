from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from backend.app.models import Check, ValidationErrorDetail, Vehicle

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000/api"
REQUEST_TIMEOUT_SECONDS = 10.0


class ApiError(Exception):
    """A failed API call.

    ``has_details`` is true when the error body carried a non-empty ``details`` list, even if
    none of its entries could be read; ``details`` holds the entries that could.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Sequence[ValidationErrorDetail] = (),
        status_code: Optional[int] = None,
        has_details: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = tuple(details)
        self.status_code = status_code
        self.has_details = bool(self.details) if has_details is None else has_details

    @property
    def is_validation_error(self) -> bool:
        return self.has_details


def parse_error_body(body: Any) -> tuple[Optional[str], tuple[ValidationErrorDetail, ...]]:
    """Extract ``error.message`` and ``error.details`` from an error body of any shape."""
    if not isinstance(body, dict) or not isinstance(body.get("error"), dict):
        return None, ()
    error = body["error"]
    message = error.get("message") if isinstance(error.get("message"), str) else None
    raw_details = error.get("details")
    if not isinstance(raw_details, list):
        return message, ()
    details = tuple(
        ValidationErrorDetail(str(entry["field"]), str(entry["reason"]))
        for entry in raw_details
        if isinstance(entry, dict) and "field" in entry and "reason" in entry
    )
    return message, details


def has_raw_details(body: Any) -> bool:
    if not isinstance(body, dict) or not isinstance(body.get("error"), dict):
        return False
    raw_details = body["error"].get("details")
    return isinstance(raw_details, list) and bool(raw_details)


class CheckApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "CheckApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_vehicles(self) -> List[Vehicle]:
        body = await self._request("GET", "/vehicles")
        if not isinstance(body, list):
            raise ApiError("Unexpected vehicle list response")
        try:
            return [Vehicle.from_payload(entry) for entry in body]
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError("Unexpected vehicle list response") from exc

    async def create_check(self, check: Check) -> Dict[str, Any]:
        body = await self._request("POST", "/checks", json=check.to_payload())
        return body if isinstance(body, dict) else {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(f"Request failed: {exc}") from exc

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message, details = parse_error_body(body)
            raise ApiError(
                message or f"Request failed with status {response.status_code}",
                details=details,
                status_code=response.status_code,
                has_details=has_raw_details(body),
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError("Response body is not valid JSON", status_code=response.status_code) from exc
