#!/usr/bin/env python3
"""CLI entry point for dose calculation.

Reads a dose request as JSON:

    {
        "patient": {"demographics": {"dateOfBirth": "1950-04-02", ...}, ...},
        "drug": {"name": "Carboplatin"},
        "standardDose": 300,
        "unit": "mg",
        "indication": "ovarian cancer"
    }

Usage:
    # Calculate from a request file
    python -m dose_engine.runner request.json

    # Read the request from stdin, print a text summary
    cat request.json | python -m dose_engine.runner - --format text

    # Include monitoring recommendations
    python -m dose_engine.runner request.json --monitoring

    # Fix the date age is computed against
    python -m dose_engine.runner request.json --as-of 2026-01-15
"""

import argparse
import json
import logging
import sys
from datetime import date

from common.dose_alerts import EngineResult, MonitoringRecommendation

from .config import Config, config
from .models import Drug, InvalidDoseRequest, PatientProfile
from .rules_engine import DoseCalculationEngine


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )


def load_request(path: str) -> dict:
    """Load a request from a file path, or stdin for '-'."""
    if path == "-":
        return json.load(sys.stdin)
    with open(path) as f:
        return json.load(f)


def format_text(result: EngineResult, monitoring: list[MonitoringRecommendation] | None = None) -> str:
    """Human-readable summary of a calculation."""
    lines = [
        f"Assessment:       {result.assessment_id}",
        f"Drug:             {result.drug}",
        f"Standard dose:    {result.standard_dose:g} {result.unit}",
        f"Recommended dose: {result.recommended_dose:g} {result.unit}",
        f"Safety score:     {result.safety_score}/100 ({result.safety_rating.value if result.safety_rating else '-'})",
    ]

    if result.adjustments:
        lines.append("")
        lines.append("Adjustments:")
        for adj in result.adjustments:
            lines.append(
                f"  x{adj.adjustment_factor:g}  {adj.original_dose:g} -> {adj.recommended_dose:g} {adj.unit}"
                f"  ({adj.adjustment_reason})"
            )

    if result.alerts:
        lines.append("")
        lines.append("Alerts:")
        for alert in result.alerts:
            lines.append(f"  [{alert.priority:>2}] {alert.severity.value.upper():<8} {alert.message}")
            lines.append(f"       {alert.recommended_action}")

    if monitoring:
        lines.append("")
        lines.append("Monitoring:")
        for rec in monitoring:
            lines.append(f"  {rec.parameter} ({rec.urgency.value}): {rec.frequency}")

    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Oncology Dose Calculation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("request", help="Path to request JSON ('-' for stdin)")
    parser.add_argument("--format", choices=["json", "text"], default="json", help="Output format (default: json)")
    parser.add_argument("--monitoring", action="store_true", help="Include monitoring recommendations")
    parser.add_argument("--as-of", type=date.fromisoformat, help="Date to compute age against (YYYY-MM-DD)")
    parser.add_argument(
        "--target-auc",
        type=float,
        help=f"Carboplatin target AUC for the Calvert hint (default: {config.CARBOPLATIN_TARGET_AUC:g})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    # Per-run settings; CLI overrides never touch the shared config
    settings = Config()
    if args.target_auc is not None:
        settings.CARBOPLATIN_TARGET_AUC = args.target_auc

    try:
        request = load_request(args.request)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read request: {e}")
        return 1

    engine = DoseCalculationEngine(settings)
    try:
        if not isinstance(request, dict):
            raise InvalidDoseRequest("Request must be a JSON object")
        patient = PatientProfile.from_dict(request.get("patient"))
        drug = Drug.from_dict(request.get("drug"))
        result = engine.calculate_dose_with_alerts(
            patient,
            drug,
            request.get("standardDose", request.get("standard_dose")),
            request.get("unit"),
            indication=request.get("indication"),
            as_of=args.as_of,
        )
        monitoring = engine.get_monitoring_recommendations(patient, drug) if args.monitoring else None
    except InvalidDoseRequest as e:
        logger.error(f"Invalid dose request: {e}")
        return 2

    if args.format == "text":
        print(format_text(result, monitoring))
    else:
        output = result.to_dict()
        if monitoring is not None:
            output["monitoringRecommendations"] = [rec.to_dict() for rec in monitoring]
        print(json.dumps(output, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
