"""Tests for pharmacogenomic dose adjustment rules."""

import pytest

from common.dose_alerts import AlertCategory, AlertSeverity
from dose_engine.models import GeneticResult
from dose_engine.rules.genetic_rules import PharmacogenomicRules

from factories import make_context, make_patient


def genetic_outcome(genetics, drug_name):
    patient = make_patient(genetics=genetics)
    return PharmacogenomicRules().assess(make_context(patient, drug_name))


@pytest.mark.parametrize(
    "gene, status, phenotype, drug_name, expected_factor, severity",
    [
        ("DPYD", "poor", "", "Capecitabine", 0.25, AlertSeverity.CRITICAL),
        ("DPYD", None, "DPYD Deficient", "Fluorouracil", 0.25, AlertSeverity.CRITICAL),
        ("DPYD", "intermediate", "", "5-FU", 0.5, AlertSeverity.HIGH),
        ("UGT1A1", "poor", "", "Irinotecan", 0.7, AlertSeverity.HIGH),
        ("UGT1A1", None, "UGT1A1*28/*28", "Irinotecan", 0.7, AlertSeverity.HIGH),
        ("TPMT", "poor", "", "Mercaptopurine", 0.1, AlertSeverity.CRITICAL),
        ("TPMT", "intermediate", "", "Azathioprine", 0.5, AlertSeverity.HIGH),
    ],
)
def test_actionable_results(gene, status, phenotype, drug_name, expected_factor, severity):
    genetic = GeneticResult(gene_symbol=gene, phenotype=phenotype, metabolizer_status=status)
    outcome = genetic_outcome([genetic], drug_name)

    assert outcome.factor == pytest.approx(expected_factor)
    assert len(outcome.alerts) == 1
    assert outcome.alerts[0].severity == severity
    assert outcome.alerts[0].category == AlertCategory.GENETIC


def test_gene_unrelated_to_drug_is_ignored():
    genetic = GeneticResult(gene_symbol="DPYD", metabolizer_status="poor")
    outcome = genetic_outcome([genetic], "Irinotecan")
    assert outcome.factor == 1.0
    assert outcome.alerts == []


def test_normal_metabolizer_is_ignored():
    genetic = GeneticResult(gene_symbol="DPYD", phenotype="Normal", metabolizer_status="normal")
    outcome = genetic_outcome([genetic], "Capecitabine")
    assert outcome.factor == 1.0
    assert outcome.alerts == []


def test_ugt1a1_intermediate_not_actionable():
    genetic = GeneticResult(gene_symbol="UGT1A1", phenotype="*1/*28", metabolizer_status="intermediate")
    outcome = genetic_outcome([genetic], "Irinotecan")
    assert outcome.alerts == []


def test_multiple_results_compound():
    """Two matching results multiply into one combined factor."""
    genetics = [
        GeneticResult(gene_symbol="DPYD", metabolizer_status="intermediate"),
        GeneticResult(gene_symbol="DPYD", metabolizer_status="poor"),
    ]
    outcome = genetic_outcome(genetics, "Capecitabine")

    assert outcome.factor == pytest.approx(0.125)
    assert len(outcome.alerts) == 2
    assert outcome.reason.startswith("Pharmacogenomic adjustment (")


def test_gene_symbol_case_insensitive():
    genetic = GeneticResult(gene_symbol="tpmt", metabolizer_status="Poor")
    outcome = genetic_outcome([genetic], "Mercaptopurine")
    assert outcome.factor == pytest.approx(0.1)


@pytest.mark.parametrize(
    "status, expected_factor",
    [
        ("Poor Metabolizer", 0.25),
        ("poor metabolizer", 0.25),
        ("Intermediate Metabolizer", 0.5),
        ("Normal Metabolizer", 1.0),
    ],
)
def test_metabolizer_suffix_is_ignored(status, expected_factor):
    genetic = GeneticResult(gene_symbol="DPYD", metabolizer_status=status)
    outcome = genetic_outcome([genetic], "Fluorouracil")
    assert outcome.factor == pytest.approx(expected_factor)
