"""Dose calculation routes for the dashboard.

JSON API used by the treatment-planning frontend to calculate a
safety-adjusted dose and the monitoring schedule for a drug.
"""

import logging

from flask import Blueprint, current_app, request

from dose_engine import DoseCalculationEngine, Drug, InvalidDoseRequest, PatientProfile
from dashboard.utils.api_response import api_success, api_error

logger = logging.getLogger(__name__)

dose_calculation_bp = Blueprint(
    "dose_calculation", __name__, url_prefix="/dose-calculation"
)


def _get_engine() -> DoseCalculationEngine:
    """Get the dose calculation engine, initializing if needed."""
    if not hasattr(current_app, "dose_engine"):
        current_app.dose_engine = DoseCalculationEngine()
    return current_app.dose_engine


def _parse_request() -> tuple[PatientProfile, Drug, dict]:
    """Parse the JSON body shared by both endpoints."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidDoseRequest("Request body must be a JSON object")
    patient = PatientProfile.from_dict(payload.get("patient"))
    drug = Drug.from_dict(payload.get("drug"))
    return patient, drug, payload


@dose_calculation_bp.route("/api/calculate", methods=["POST"])
def api_calculate():
    """Calculate a safety-adjusted dose with prioritized alerts."""
    try:
        patient, drug, payload = _parse_request()
        result = _get_engine().calculate_dose_with_alerts(
            patient,
            drug,
            payload.get("standardDose"),
            payload.get("unit"),
            indication=payload.get("indication"),
        )
        return api_success(data=result.to_dict())
    except InvalidDoseRequest as e:
        logger.warning(f"Rejected dose calculation request: {e}")
        return api_error(e, 400)
    except Exception as e:
        logger.error(f"Dose calculation failed: {e}", exc_info=True)
        return api_error("Dose calculation failed", 500)


@dose_calculation_bp.route("/api/monitoring", methods=["POST"])
def api_monitoring():
    """Monitoring recommendations for a drug."""
    try:
        patient, drug, _ = _parse_request()
        recommendations = _get_engine().get_monitoring_recommendations(patient, drug)
        return api_success(data=[rec.to_dict() for rec in recommendations])
    except InvalidDoseRequest as e:
        logger.warning(f"Rejected monitoring request: {e}")
        return api_error(e, 400)
    except Exception as e:
        logger.error(f"Monitoring lookup failed: {e}", exc_info=True)
        return api_error("Monitoring lookup failed", 500)
