# court_estimator/materials.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from math import ceil
from typing import List

from court_estimator.models import (
    CostLine,
    CostSection,
    ProjectDimensions,
    SurfaceSystemSpec,
    line,
    num,
    round_money,
)
from court_estimator.rate_table import RateKey, RateTable

logger = logging.getLogger(__name__)


SQFT_PER_GALLON = 100
GALLONS_PER_DRUM = 30
FREIGHT_PER_DRUM = 100.0
COATS = 2
COLOR_COAT_WASTE_FACTOR = 1.15
RESURFACER_WASTE_FACTOR = 1.25

# Rate names as they appear in the pricing table
PRESSURE_WASH = "Pressure Washing"
ACID_WASH = "Acid Wash (Concrete Only)"
PATCH_BINDER = "Court Patch Binder - Materials"  # per 5-gallon pail
SAND = "Sand"  # per 50 lb bag
CEMENT = "Cement"  # per 48-quart case
MINOR_CRACKS = "Minor Crack Repair (Filling and Sealing)"
MAJOR_CRACKS = "Major Crack Repair (Filling and Sealing)"
FIBERGLASS_MATERIALS = "Fiberglass Mesh System Materials"
FIBERGLASS_INSTALLATION = "Fiberglass Mesh System Installation"
CUSHION_MATERIALS = "Cushion System Materials"
CUSHION_INSTALLATION = "Cushion System Installation"
RESURFACER_MATERIAL_ID = 20  # per gallon, billed by the drum
RESURFACER_INSTALLATION_ID = 50  # per sq ft, two coats


def _ceil(value: float) -> int:
    # round first so float noise (e.g. 22.999999999999996) doesn't order an extra unit
    return int(ceil(round(value, 6)))


def gallons_needed(square_feet: float, waste_factor: float = COLOR_COAT_WASTE_FACTOR,
                   coats: int = COATS) -> int:
    """Gallons of coating for an area: ceil(sq ft / 100 x waste x coats)."""
    square_feet = num(square_feet)
    if square_feet <= 0:
        return 0
    return _ceil((square_feet / SQFT_PER_GALLON) * waste_factor * coats)


def drums_needed(gallons: float) -> int:
    gallons = num(gallons)
    if gallons <= 0:
        return 0
    return _ceil(gallons / GALLONS_PER_DRUM)


@dataclass
class MaterialsBreakdown:
    square_footage: float
    surface_prep: CostSection
    patch_work: CostSection
    additional_systems: CostSection
    resurfacer: CostSection
    resurfacer_gallons: int
    resurfacer_drums: int
    total: float
    rate_keys: List[RateKey] = field(default_factory=list)

    @property
    def sections(self) -> List[CostSection]:
        return [self.surface_prep, self.patch_work, self.additional_systems, self.resurfacer]


def _surface_prep_lines(surface: SurfaceSystemSpec, area: float, rates: RateTable) -> List[CostLine]:
    lines: List[CostLine] = []
    if surface.needs_pressure_wash:
        lines.append(line("pressure_wash", PRESSURE_WASH, area, "sq ft",
                          rates.get_price_by_name(PRESSURE_WASH)))
    if surface.needs_acid_wash:
        lines.append(line("acid_wash", ACID_WASH, area, "sq ft",
                          rates.get_price_by_name(ACID_WASH)))
    return lines


def _patch_work_lines(surface: SurfaceSystemSpec, rates: RateTable) -> List[CostLine]:
    patch = surface.patch_work
    if not patch or not patch.needed:
        return []

    gallons = num(patch.estimated_gallons)
    # 2 bags of sand per 3 gallons of binder, one quart of cement per gallon
    sand_bags = _ceil(gallons / 3 * 2) if gallons > 0 else 0
    cement_quarts = _ceil(gallons) if gallons > 0 else 0
    minor = num(patch.minor_crack_gallons)
    major = num(patch.major_crack_gallons)

    return [
        line("patch_binder", "Court patch binder", gallons, "gal",
             rates.get_price_by_name(PATCH_BINDER) / 5),
        line("sand", "Sand", sand_bags, "bag", rates.get_price_by_name(SAND)),
        line("cement", "Cement", cement_quarts, "qt",
             rates.get_price_by_name(CEMENT) / 48),
        line("minor_cracks", "Crack filler (minor)", minor, "gal",
             rates.get_price_by_name(MINOR_CRACKS)),
        line("major_cracks", "Crack filler (major)", major, "gal",
             rates.get_price_by_name(MAJOR_CRACKS)),
    ]


def _additional_system_lines(surface: SurfaceSystemSpec, rates: RateTable) -> List[CostLine]:
    lines: List[CostLine] = []
    if surface.fiberglass_mesh_needed:
        mesh_area = num(surface.fiberglass_mesh_area)
        lines.append(line("fiberglass_materials", "Fiberglass mesh materials", mesh_area, "sq ft",
                          rates.get_price_by_name(FIBERGLASS_MATERIALS)))
        lines.append(line("fiberglass_installation", "Fiberglass mesh installation", mesh_area, "sq ft",
                          rates.get_price_by_name(FIBERGLASS_INSTALLATION)))
    if surface.cushion_system_needed:
        cushion_area = num(surface.cushion_system_area)
        lines.append(line("cushion_materials", "Cushion system materials", cushion_area, "sq ft",
                          rates.get_price_by_name(CUSHION_MATERIALS)))
        lines.append(line("cushion_installation", "Cushion system installation", cushion_area, "sq ft",
                          rates.get_price_by_name(CUSHION_INSTALLATION)))
    return lines


def _resurfacer_lines(area: float, rates: RateTable) -> tuple:
    gallons = gallons_needed(area, RESURFACER_WASTE_FACTOR, COATS)
    drums = drums_needed(gallons)
    drum_price = rates.get_price_by_id(RESURFACER_MATERIAL_ID) * GALLONS_PER_DRUM

    lines = [
        line("resurfacer_material", "Acrylic resurfacer", drums, "drum", drum_price),
        line("resurfacer_freight", "Resurfacer freight", drums, "drum",
             FREIGHT_PER_DRUM if drums else 0.0),
        line("resurfacer_installation", "Acrylic resurfacer - (2) coats", area, "sq ft",
             rates.get_price_by_id(RESURFACER_INSTALLATION_ID)),
    ]
    return lines, gallons, drums


def _rate_keys(surface: SurfaceSystemSpec) -> List[RateKey]:
    keys: List[RateKey] = [RESURFACER_MATERIAL_ID, RESURFACER_INSTALLATION_ID]
    if surface.needs_pressure_wash:
        keys.append(PRESSURE_WASH)
    if surface.needs_acid_wash:
        keys.append(ACID_WASH)
    if surface.patch_work and surface.patch_work.needed:
        keys.extend([PATCH_BINDER, SAND, CEMENT, MINOR_CRACKS, MAJOR_CRACKS])
    if surface.fiberglass_mesh_needed:
        keys.extend([FIBERGLASS_MATERIALS, FIBERGLASS_INSTALLATION])
    if surface.cushion_system_needed:
        keys.extend([CUSHION_MATERIALS, CUSHION_INSTALLATION])
    return keys


def calculate_materials(
    surface: SurfaceSystemSpec,
    dimensions: ProjectDimensions,
    rates: RateTable,
) -> MaterialsBreakdown:
    """
    Surface prep, patch work, mesh/cushion systems and acrylic resurfacer.

    - Wash lines are area x rate, only when flagged.
    - Patch binder is quoted per 5-gallon pail, cement per 48-quart case;
      sand bags and cement quarts are rounded up.
    - Resurfacer gallons are rounded up, then ordered in whole 30-gallon
      drums with $100 freight per drum.
    """
    surface = surface or SurfaceSystemSpec()
    area = dimensions.area if dimensions else 0.0

    surface_prep = CostSection.build("Surface preparation", _surface_prep_lines(surface, area, rates))
    patch_work = CostSection.build("Patch work", _patch_work_lines(surface, rates))
    additional = CostSection.build("Additional systems", _additional_system_lines(surface, rates))
    resurfacer_lines, gallons, drums = _resurfacer_lines(area, rates)
    resurfacer = CostSection.build("Acrylic resurfacer", resurfacer_lines)

    total = round_money(
        surface_prep.subtotal + patch_work.subtotal + additional.subtotal + resurfacer.subtotal
    )
    logger.debug("Materials for %.0f sq ft: %d gal resurfacer, total %.2f", area, gallons, total)

    return MaterialsBreakdown(
        square_footage=area,
        surface_prep=surface_prep,
        patch_work=patch_work,
        additional_systems=additional,
        resurfacer=resurfacer,
        resurfacer_gallons=gallons,
        resurfacer_drums=drums,
        total=total,
        rate_keys=_rate_keys(surface),
    )
