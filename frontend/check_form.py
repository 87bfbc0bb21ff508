from __future__ import annotations

import logging
import math
import re
from enum import Enum
from typing import Callable, List, Optional, Protocol

from backend.app.forms import NOTE_MAX_LENGTH
from backend.app.models import Check, CheckItemKey, CheckStatus, ValidationErrorDetail, Vehicle

from .api import ApiError
from .checklist import ChecklistState
from .notifications import Notifier, ToastType
from .vehicles import VehicleDirectory

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Inspection submitted successfully."
GENERIC_ERROR_MESSAGE = "Failed to submit check. Please try again."
VALIDATION_FALLBACK_MESSAGE = "Validation failed."

_FLOAT_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class CheckApi(Protocol):
    async def get_vehicles(self) -> List[Vehicle]: ...

    async def create_check(self, check: Check) -> dict: ...


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class SubmissionOutcome(str, Enum):
    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"
    GENERIC_FAILED = "generic_failed"


def parse_odometer(text: str) -> float:
    """Parse the leading number of ``text`` the way a browser's ``parseFloat`` does; NaN if none."""
    match = _FLOAT_PREFIX.match(text.lstrip())
    if not match:
        return math.nan
    return float(match.group(0))


def classify_error(exc: Exception) -> tuple[SubmissionOutcome, List[str]]:
    if isinstance(exc, ApiError) and exc.is_validation_error:
        return SubmissionOutcome.VALIDATION_FAILED, [detail.message for detail in exc.details]
    return SubmissionOutcome.GENERIC_FAILED, []


class CheckForm:
    """Form state for a single vehicle check and the submit workflow driving it.

    One request at most is in flight per form: ``submit`` refuses to start while the
    form is submitting. Field values survive every failed submit and are only reset
    after the backend accepts the check.
    """

    def __init__(
        self,
        api: CheckApi,
        notify: Notifier,
        on_success: Optional[Callable[[], None]] = None,
        *,
        validate_locally: bool = False,
    ) -> None:
        self.api = api
        self.notify = notify
        self.on_success = on_success
        self.validate_locally = validate_locally
        self.vehicles = VehicleDirectory(api.get_vehicles)
        self.checklist = ChecklistState()
        self.selected_vehicle = ""
        self.odometer_km = ""
        self.note = ""
        self.state = SubmissionState.IDLE
        self.error: Optional[str] = None
        self.validation_errors: List[str] = []
        self.unmounted = False
        self._mount_started = False
        self._generation = 0

    # Lifecycle ------------------------------------------------------------------
    async def mount(self) -> None:
        if self._mount_started or self.unmounted:
            return
        self._mount_started = True
        await self.vehicles.load()

    def unmount(self) -> None:
        self.unmounted = True
        self._generation += 1

    async def aclose(self) -> None:
        self.unmount()
        aclose = getattr(self.api, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "CheckForm":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # Field updates --------------------------------------------------------------
    def select_vehicle(self, vehicle_id: str) -> None:
        self.selected_vehicle = vehicle_id

    def set_odometer(self, text: str) -> None:
        self.odometer_km = text

    def set_note(self, text: str) -> None:
        self.note = text[:NOTE_MAX_LENGTH]

    def set_item_status(self, key: CheckItemKey, status: CheckStatus) -> None:
        self.checklist.set_status(key, status)

    def reset(self) -> None:
        self.selected_vehicle = ""
        self.odometer_km = ""
        self.note = ""
        self.checklist.initialize()

    # View state -----------------------------------------------------------------
    @property
    def submitting(self) -> bool:
        return self.state is SubmissionState.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return not self.submitting

    @property
    def submit_label(self) -> str:
        return "Submitting..." if self.submitting else "Submit Check"

    @property
    def note_length(self) -> int:
        return len(self.note)

    # Submission -----------------------------------------------------------------
    def build_check(self) -> Check:
        note = self.note.strip()
        return Check(
            vehicle_id=self.selected_vehicle,
            odometer_km=parse_odometer(self.odometer_km),
            items=self.checklist.items,
            note=note or None,
        )

    def local_errors(self, check: Check) -> List[ValidationErrorDetail]:
        details: List[ValidationErrorDetail] = []
        if not check.vehicle_id:
            details.append(ValidationErrorDetail("vehicleId", "is required"))
        if not math.isfinite(check.odometer_km):
            details.append(ValidationErrorDetail("odometerKm", "must be a number"))
        elif check.odometer_km <= 0:
            details.append(ValidationErrorDetail("odometerKm", "must be positive"))
        return details

    async def submit(self) -> Optional[SubmissionOutcome]:
        if self.unmounted:
            logger.debug("Submit ignored: the form has been unmounted")
            return None
        if self.submitting:
            logger.debug("Submit ignored: a submission is already in flight")
            return None

        self.error = None
        self.validation_errors = []
        self.state = SubmissionState.SUBMITTING
        generation = self._generation
        try:
            check = self.build_check()
            local = self.local_errors(check) if self.validate_locally else []
            if local:
                outcome, messages = SubmissionOutcome.VALIDATION_FAILED, [detail.message for detail in local]
            else:
                try:
                    await self.api.create_check(check)
                except Exception as exc:
                    outcome, messages = classify_error(exc)
                    logger.warning("Check submission failed (%s): %s", outcome.value, exc)
                else:
                    outcome, messages = SubmissionOutcome.SUCCESS, []
        finally:
            self.state = SubmissionState.IDLE

        if generation != self._generation:
            logger.info("Discarding %s result for a form that is no longer mounted", outcome.value)
            return outcome

        if outcome is SubmissionOutcome.SUCCESS:
            self._apply_success()
        elif outcome is SubmissionOutcome.VALIDATION_FAILED:
            self._apply_validation_failure(messages)
        else:
            self._apply_generic_failure()
        return outcome

    def _apply_success(self) -> None:
        self.reset()
        self.notify(SUCCESS_MESSAGE, ToastType.SUCCESS)
        if self.on_success:
            self.on_success()

    def _apply_validation_failure(self, messages: List[str]) -> None:
        self.validation_errors = messages
        self.notify(messages[0] if messages else VALIDATION_FALLBACK_MESSAGE, ToastType.ERROR)

    def _apply_generic_failure(self) -> None:
        self.error = GENERIC_ERROR_MESSAGE
        self.notify(GENERIC_ERROR_MESSAGE, ToastType.ERROR)
