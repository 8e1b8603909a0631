# court_estimator/estimator.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from court_estimator.color_coat import ColorCoatBreakdown, calculate_color_coat
from court_estimator.equipment import EquipmentBreakdown, calculate_equipment
from court_estimator.labor import LaborBreakdown, calculate_labor
from court_estimator.materials import MaterialsBreakdown, calculate_materials
from court_estimator.models import (
    DEFAULT_LOGISTICS,
    CostLine,
    CourtConfiguration,
    EquipmentSpec,
    LogisticsSpec,
    ProjectDimensions,
    SurfaceSystemSpec,
    line,
    round_money,
)
from court_estimator.rate_table import RateTable

logger = logging.getLogger(__name__)


DEFAULT_TAX_RATE = 0.06
DEFAULT_MARGIN_RATE = 0.30


@dataclass
class ProjectInput:
    """
    Everything the estimator needs for one job.

    These are the same fields the estimate form collects.
    """
    dimensions: ProjectDimensions = field(default_factory=ProjectDimensions)
    surface: SurfaceSystemSpec = field(default_factory=SurfaceSystemSpec)
    courts: CourtConfiguration = field(default_factory=CourtConfiguration)
    equipment: EquipmentSpec = field(default_factory=EquipmentSpec)
    logistics: LogisticsSpec = DEFAULT_LOGISTICS


@dataclass
class EquipmentPackage:
    key: str
    title: str
    items: List[CostLine]
    total: float


@dataclass
class CourtEstimate:
    square_footage: float
    materials: MaterialsBreakdown
    color_coat: ColorCoatBreakdown
    labor: LaborBreakdown
    equipment: EquipmentBreakdown
    base_total: float
    tax_rate: float
    tax_amount: float
    margin_rate: float
    margin_amount: float
    total: float
    price_per_sqft: float
    packages: List[EquipmentPackage]
    packages_total: float
    warnings: List[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)


# package key -> (title, equipment category keys)
PACKAGES = (
    ("tennis", "Tennis Equipment Package", ("tennis_posts",)),
    ("pickleball", "Pickleball Equipment Package", ("pickleball_posts", "mobile_nets")),
    ("basketball", "Basketball Equipment Package", ("basketball_60", "basketball_72", "basketball_fixed")),
    ("windscreen", "Windscreen Package", ("standard_windscreen", "high_grade_windscreen")),
)


def build_equipment_packages(equipment: EquipmentBreakdown) -> List[EquipmentPackage]:
    """
    Group present equipment categories into optional packages.

    Packages are quoted on their own so the client can accept or decline
    each one; they never enter the taxed/margined base.
    """
    packages: List[EquipmentPackage] = []
    for key, title, category_keys in PACKAGES:
        items: List[CostLine] = []
        for category_key in category_keys:
            category = equipment.category(category_key)
            if not category.present:
                continue
            items.append(category.equipment)
            if category.installation:
                items.append(
                    line(f"{category.key}_installation_total",
                         f"{category.label} - installation & materials",
                         category.quantity, category.unit, 0.0,
                         subtotal=category.installation_total)
                )
        if items:
            packages.append(
                EquipmentPackage(
                    key=key,
                    title=title,
                    items=items,
                    total=round_money(sum(item.subtotal for item in items)),
                )
            )
    return packages


def _collect_warnings(rates: RateTable, color_coat: ColorCoatBreakdown, *breakdowns) -> List[str]:
    keys = []
    for breakdown in (color_coat,) + breakdowns:
        keys.extend(breakdown.rate_keys)
    missing = rates.missing(dict.fromkeys(keys))

    warnings = [f"Missing rate: {key}" for key in sorted(missing, key=str)]
    over = color_coat.areas.over_allocated_area
    if over > 0:
        warnings.append(
            f"Court areas exceed the project square footage by {over:,.0f} sq ft; apron area set to 0"
        )
    return warnings


def calculate_estimate(
    project: ProjectInput,
    rates: RateTable,
    tax_rate: float = DEFAULT_TAX_RATE,
    margin_rate: float = DEFAULT_MARGIN_RATE,
) -> CourtEstimate:
    """
    Roll every calculator up into a proposal total.

    - base = materials + color coat + labor/travel
    - tax and margin are both taken on the same base:
      total = base + base x tax_rate + base x margin_rate
    - equipment is presented as separate optional packages.
    """
    if tax_rate < 0 or margin_rate < 0:
        raise ValueError("tax_rate and margin_rate must be non-negative")

    project = project or ProjectInput()
    dimensions = project.dimensions or ProjectDimensions()
    area = dimensions.area

    materials = calculate_materials(project.surface, dimensions, rates)
    color_coat = calculate_color_coat(project.courts, area, rates)
    labor = calculate_labor(project.logistics, rates)
    equipment = calculate_equipment(project.equipment, rates)

    base_total = materials.total + color_coat.total + labor.total
    tax_amount = base_total * tax_rate
    margin_amount = base_total * margin_rate
    total = base_total + tax_amount + margin_amount

    packages = build_equipment_packages(equipment)
    warnings = _collect_warnings(rates, color_coat, materials, labor, equipment)
    if warnings:
        logger.warning("Degraded estimate: %s", "; ".join(warnings))

    return CourtEstimate(
        square_footage=area,
        materials=materials,
        color_coat=color_coat,
        labor=labor,
        equipment=equipment,
        base_total=round_money(base_total),
        tax_rate=tax_rate,
        tax_amount=round_money(tax_amount),
        margin_rate=margin_rate,
        margin_amount=round_money(margin_amount),
        total=round_money(total),
        price_per_sqft=round_money(total / area) if area > 0 else 0.0,
        packages=packages,
        packages_total=round_money(sum(p.total for p in packages)),
        warnings=warnings,
    )


def summarize(estimate: CourtEstimate) -> dict:
    """Flat totals for list views and logs."""
    return {
        "square_footage": estimate.square_footage,
        "materials": estimate.materials.total,
        "color_coat": estimate.color_coat.total,
        "labor": estimate.labor.total,
        "base_total": estimate.base_total,
        "tax": estimate.tax_amount,
        "margin": estimate.margin_amount,
        "total": estimate.total,
        "packages_total": estimate.packages_total,
        "warnings": len(estimate.warnings),
    }


def quote_project_name(project_name: Optional[str], estimate: CourtEstimate) -> str:
    return project_name or f"Court surfacing - {estimate.square_footage:,.0f} sq ft"
