# tests/test_estimator.py
import pytest

from court_estimator.estimator import ProjectInput, calculate_estimate, summarize
from court_estimator.models import (
    CourtConfiguration,
    EquipmentSpec,
    LogisticsSpec,
    ProjectDimensions,
    SurfaceSystemSpec,
)


@pytest.fixture
def project():
    return ProjectInput(
        dimensions=ProjectDimensions(square_footage=2000),
        courts=CourtConfiguration(tennis_courts=1, tennis_court_color="dark-blue", apron_color="gray"),
        equipment=EquipmentSpec(tennis_post_sets=1),
        logistics=LogisticsSpec(travel_days=3, number_of_trips=1, distance_to_site=50),
    )


def test_base_total_sums_materials_color_coat_and_labor(rates, project):
    estimate = calculate_estimate(project, rates)

    assert estimate.materials.total == 1200  # 2 drums + freight + installation
    assert estimate.color_coat.total == 3225  # 2100 material + 400 install + 725 lines
    assert estimate.labor.total == pytest.approx(2223)
    assert estimate.base_total == pytest.approx(6648)


def test_tax_and_margin_apply_to_the_same_base(rates, project):
    estimate = calculate_estimate(project, rates)

    assert estimate.tax_amount == pytest.approx(398.88)
    assert estimate.margin_amount == pytest.approx(1994.40)
    assert estimate.total == pytest.approx(9041.28)
    assert estimate.total == pytest.approx(estimate.base_total * 1.36)
    assert estimate.price_per_sqft == pytest.approx(4.52)


def test_custom_rates(rates, project):
    estimate = calculate_estimate(project, rates, tax_rate=0, margin_rate=0.5)
    assert estimate.tax_amount == 0
    assert estimate.total == pytest.approx(6648 * 1.5)


def test_negative_multipliers_rejected(rates, project):
    with pytest.raises(ValueError):
        calculate_estimate(project, rates, tax_rate=-0.01)


def test_equipment_packages_stay_out_of_the_base(rates, project):
    with_equipment = calculate_estimate(project, rates)
    project.equipment = EquipmentSpec()
    without_equipment = calculate_estimate(project, rates)

    assert with_equipment.total == without_equipment.total
    assert [p.key for p in with_equipment.packages] == ["tennis"]
    assert with_equipment.packages[0].total == 500
    assert with_equipment.packages_total == 500
    assert without_equipment.packages == []


def test_packages_include_installation(rates):
    project = ProjectInput(
        equipment=EquipmentSpec(
            pickleball_post_sets=1, pickleball_posts_installation=True, mobile_pickleball_nets=1,
            standard_windscreen=50, high_grade_windscreen=20,
        ),
    )
    estimate = calculate_estimate(project, rates)
    packages = {p.key: p for p in estimate.packages}

    assert set(packages) == {"pickleball", "windscreen"}
    # posts 400 + (2 holes x 550 + 1.5 h x 65) + nets 400
    assert packages["pickleball"].total == pytest.approx(400 + 1197.5 + 400)
    assert len(packages["pickleball"].items) == 3
    assert packages["windscreen"].total == pytest.approx(150 + 100)


def test_over_allocation_is_flagged_not_rejected(rates, project):
    estimate = calculate_estimate(project, rates)
    assert estimate.color_coat.areas.remaining_area == 0
    assert len(estimate.warnings) == 1
    assert "exceed the project square footage by 808" in estimate.warnings[0]
    assert estimate.degraded


def test_clean_estimate_has_no_warnings(rates):
    project = ProjectInput(
        dimensions=ProjectDimensions(square_footage=7200),
        courts=CourtConfiguration(tennis_courts=1, tennis_court_color="dark-blue", apron_color="red"),
    )
    estimate = calculate_estimate(project, rates)
    assert estimate.warnings == []
    assert not estimate.degraded


def test_missing_rates_degrade_silently(empty_rates, project):
    estimate = calculate_estimate(project, empty_rates)

    assert estimate.materials.total == pytest.approx(200)  # freight only
    assert estimate.labor.total == pytest.approx(663)  # mileage, hotel, per diem
    assert "Missing rate: General Labor Rate" in estimate.warnings
    assert "Missing rate: 21" in estimate.warnings
    assert "Missing rate: Permanent Tennis Posts" in estimate.warnings


def test_empty_project(rates):
    estimate = calculate_estimate(ProjectInput(), rates)
    assert estimate.square_footage == 0
    assert estimate.materials.total == 0
    assert estimate.color_coat.total == 0
    assert estimate.price_per_sqft == 0
    assert estimate.packages == []


def test_surface_prep_flows_into_base(rates, project):
    project.surface = SurfaceSystemSpec(needs_acid_wash=True)
    estimate = calculate_estimate(project, rates)
    assert estimate.base_total == pytest.approx(6648 + 1000)


def test_estimate_is_idempotent(rates, project):
    assert calculate_estimate(project, rates) == calculate_estimate(project, rates)


def test_summarize(rates, project):
    summary = summarize(calculate_estimate(project, rates))
    assert summary["total"] == pytest.approx(9041.28)
    assert summary["packages_total"] == 500
    assert summary["warnings"] == 1
