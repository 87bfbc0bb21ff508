from __future__ import annotations

import html
from typing import Callable, Optional

import httpx

from backend.app.forms import NOTE_MAX_LENGTH
from backend.app.models import CheckStatus, Vehicle

from .api import DEFAULT_API_URL, CheckApiClient
from .check_form import CheckForm
from .notifications import Notifier, ToastQueue


def vehicle_option_label(vehicle: Vehicle) -> str:
    return f"{vehicle.registration} - {vehicle.make} {vehicle.model} ({vehicle.year})"


def create_check_form(
    base_url: str = DEFAULT_API_URL,
    *,
    notify: Optional[Notifier] = None,
    on_success: Optional[Callable[[], None]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    validate_locally: bool = False,
) -> CheckForm:
    api = CheckApiClient(base_url, transport=transport)
    return CheckForm(
        api,
        notify if notify is not None else ToastQueue(),
        on_success,
        validate_locally=validate_locally,
    )


# Rendering helpers ----------------------------------------------------------
def render_check_form(form: CheckForm) -> str:
    disabled = "" if form.can_submit else " disabled"
    return f"""
    <form method=\"post\" class=\"check-form\">
      <h2>Submit Vehicle Inspection Result</h2>
      {_render_errors(form)}
      <div class=\"form-group\">
        <label for=\"vehicle\">Vehicle *</label>
        <select id=\"vehicle\" name=\"vehicle\" required>
          {_render_vehicle_options(form)}
        </select>
      </div>
      <div class=\"form-group\">
        <label for=\"odometer\">Odometer (km) *</label>
        <input id=\"odometer\" name=\"odometer\" type=\"number\" min=\"1\" step=\"1\" inputmode=\"numeric\" value=\"{html.escape(form.odometer_km)}\" placeholder=\"Enter odometer reading\" required />
      </div>
      <div class=\"form-group\">
        <label>Checklist Items *</label>
        <div class=\"checklist\">{_render_checklist(form)}</div>
      </div>
      <div class=\"form-group\">
        <label for=\"note\">Notes (Optional)</label>
        <textarea id=\"note\" name=\"note\" maxlength=\"{NOTE_MAX_LENGTH}\" rows=\"4\" placeholder=\"Add optional inspection notes\">{html.escape(form.note)}</textarea>
        <small>{form.note_length}/{NOTE_MAX_LENGTH}</small>
      </div>
      <button type=\"submit\"{disabled}>{html.escape(form.submit_label)}</button>
    </form>
    """


def _render_errors(form: CheckForm) -> str:
    parts: list[str] = []
    if form.error:
        parts.append(f'<div class="error-banner">{html.escape(form.error)}</div>')
    if form.validation_errors:
        items = "".join(f"<li>{html.escape(message)}</li>" for message in form.validation_errors)
        parts.append(f'<div class="error-banner"><strong>Validation errors:</strong><ul>{items}</ul></div>')
    return "".join(parts)


def _render_vehicle_options(form: CheckForm) -> str:
    options = ['<option value="">Select a vehicle</option>']
    for vehicle in form.vehicles:
        selected = " selected" if vehicle.id == form.selected_vehicle else ""
        options.append(
            f'<option value="{html.escape(vehicle.id)}"{selected}>{html.escape(vehicle_option_label(vehicle))}</option>'
        )
    return "".join(options)


def _render_checklist(form: CheckForm) -> str:
    rows: list[str] = []
    for item in form.checklist:
        radios = "".join(
            f'<label><input type="radio" name="status-{item.key.value}" value="{status.value}"'
            f'{" checked" if item.status is status else ""} />{status.value}</label>'
            for status in CheckStatus
        )
        rows.append(
            f'<div class="checklist-item"><span class="item-label">{item.key.value}</span>'
            f'<div class="radio-group">{radios}</div></div>'
        )
    return "".join(rows)
