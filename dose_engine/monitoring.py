"""Drug-driven clinical monitoring recommendations."""

from common.dose_alerts import MonitoringRecommendation, MonitoringUrgency

from .drug_identity import DrugIdentity, ResolvedDrug

# (drugs that trigger it, parameter, frequency, rationale, urgency), in output order
MONITORING_SCHEDULES = (
    (
        frozenset({DrugIdentity.DOXORUBICIN}),
        "LVEF/ECHO",
        "Before treatment, after 200-300 mg/m², then every 100 mg/m²",
        "Monitor for doxorubicin-induced cardiomyopathy",
        MonitoringUrgency.CRITICAL,
    ),
    (
        frozenset({DrugIdentity.CISPLATIN}),
        "Creatinine/BUN",
        "Before each cycle",
        "Monitor for cisplatin nephrotoxicity",
        MonitoringUrgency.CRITICAL,
    ),
    (
        frozenset({DrugIdentity.CISPLATIN}),
        "Audiometry",
        "Baseline, then as clinically indicated",
        "Monitor for cisplatin ototoxicity",
        MonitoringUrgency.ROUTINE,
    ),
    (
        frozenset({DrugIdentity.CISPLATIN}),
        "Electrolytes (Mg, K)",
        "Before each cycle",
        "Monitor for cisplatin-induced electrolyte wasting",
        MonitoringUrgency.URGENT,
    ),
    (
        frozenset({DrugIdentity.PACLITAXEL}),
        "Neurological exam",
        "Before each cycle",
        "Monitor for paclitaxel-induced peripheral neuropathy",
        MonitoringUrgency.ROUTINE,
    ),
    (
        frozenset({DrugIdentity.CARBOPLATIN, DrugIdentity.CISPLATIN, DrugIdentity.DOXORUBICIN}),
        "CBC with differential",
        "Before each cycle, nadir count (day 10-14)",
        "Monitor for myelosuppression",
        MonitoringUrgency.CRITICAL,
    ),
)


def monitoring_recommendations_for(drug: ResolvedDrug) -> list[MonitoringRecommendation]:
    """Monitoring schedule for a resolved drug.

    Driven by drug identity only; patient data does not change the schedule.
    """
    return [
        MonitoringRecommendation(
            parameter=parameter,
            frequency=frequency,
            rationale=rationale,
            urgency=urgency,
        )
        for drugs, parameter, frequency, rationale, urgency in MONITORING_SCHEDULES
        if drug.in_group(drugs)
    ]
