# tests/test_quote.py
from court_estimator.estimator import ProjectInput, calculate_estimate
from court_estimator.models import (
    CourtConfiguration,
    EquipmentSpec,
    LogisticsSpec,
    ProjectDimensions,
)
from court_estimator.quote import render_quote


def _estimate(rates):
    project = ProjectInput(
        dimensions=ProjectDimensions(square_footage=2000),
        courts=CourtConfiguration(tennis_courts=1, tennis_court_color="dark-blue", apron_color="gray"),
        equipment=EquipmentSpec(tennis_post_sets=1),
        logistics=LogisticsSpec(travel_days=3, distance_to_site=50),
    )
    return calculate_estimate(project, rates)


def test_quote_lists_sections_totals_and_packages(rates):
    text = render_quote(_estimate(rates), customer_name="Riverside HOA").decode("utf-8")

    assert text.startswith("COURT SURFACING QUOTE")
    assert "Customer: Riverside HOA" in text
    assert "Project: Court surfacing - 2,000 sq ft" in text
    assert "ACRYLIC RESURFACER" in text
    assert "LINE PAINTING" in text
    assert "9041.28" in text
    assert "OPTIONAL EQUIPMENT PACKAGES" in text
    assert "Tennis Equipment Package" in text
    assert text.rstrip().endswith("Thank you for your business.")


def test_quote_skips_empty_sections(rates):
    text = render_quote(_estimate(rates)).decode("utf-8")
    assert "SURFACE PREPARATION" not in text
    assert "PATCH WORK" not in text


def test_quote_notes_carry_warnings(rates):
    text = render_quote(_estimate(rates), project_name="Smith backyard").decode("utf-8")
    assert "Project: Smith backyard" in text
    assert "NOTES" in text
    assert "exceed the project square footage" in text


def test_quote_without_packages(rates):
    estimate = calculate_estimate(ProjectInput(dimensions=ProjectDimensions(square_footage=1000)), rates)
    text = render_quote(estimate).decode("utf-8")
    assert "OPTIONAL EQUIPMENT PACKAGES" not in text


def test_quote_written_to_output_path(rates, tmp_path):
    target = tmp_path / "quote.txt"
    data = render_quote(_estimate(rates), output_path=str(target))
    assert target.read_bytes() == data
