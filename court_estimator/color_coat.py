# court_estimator/color_coat.py
"""
Color coating: split the surfaced area into per-color regions, then price
coating material, installation and line painting.

Court areas come from standard layouts (plus overrun) multiplied by the court
count. Whatever square footage is left goes to the apron color; if no apron
color is chosen it stays unassigned and is priced as gray.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from court_estimator.materials import (
    COATS,
    COLOR_COAT_WASTE_FACTOR,
    FREIGHT_PER_DRUM,
    drums_needed,
    gallons_needed,
)
from court_estimator.models import (
    CostLine,
    CostSection,
    CourtConfiguration,
    line,
    num,
    round_money,
)
from court_estimator.rate_table import RateKey, RateTable

logger = logging.getLogger(__name__)


# width, length in feet
TENNIS_COURT = (36, 78)
PICKLEBALL_KITCHEN = (14, 20)
PICKLEBALL_COURT = (30, 60)
BASKETBALL_HALF = (50, 50)
BASKETBALL_FULL = (50, 94)
BASKETBALL_LANE = (16, 19)  # per basket

# color value -> (label, drum price id)
COLORS: Dict[str, tuple] = {
    "dark-blue": ("Dark Blue", 21),
    "dark-green": ("Dark Green", 55),
    "gray": ("Gray", 56),
    "light-blue": ("Light Blue", 57),
    "light-green": ("Light Green", 58),
    "medium-green": ("Medium Green", 59),
    "purple": ("Purple", 60),
    "red": ("Red", 61),
    "sahara-sand": ("Sahara Sand", 62),
}
DEFAULT_COLOR = "gray"

INSTALLATION_ID = 64  # color coat installation, (2) coats, per sq ft
UPCHARGE_IDS = {2: 65, 3: 66, 4: 67, 5: 68}  # 5 covers five or more colors

TENNIS_LINES_ID = 69
PICKLEBALL_LINES_ID = 70
BASKETBALL_HALF_LINES_ID = 71
BASKETBALL_FULL_LINES_ID = 72
THREE_POINT_LINE_IDS = {
    "high-school": 73,
    "nba": 74,
    "college": 75,
}


def _area(dimensions: tuple) -> float:
    width, length = dimensions
    return float(width * length)


def color_material_id(color: Optional[str]) -> int:
    """Drum price id for a color; unknown colors fall back to gray."""
    entry = COLORS.get((color or "").strip().lower())
    return entry[1] if entry else COLORS[DEFAULT_COLOR][1]


def color_label(color: Optional[str]) -> str:
    entry = COLORS.get((color or "").strip().lower())
    return entry[0] if entry else "Unknown"


def normalise_color(color: Optional[str]) -> str:
    return (color or "").strip().lower()


@dataclass
class ColorAreas:
    square_footage: float
    color_areas: Dict[str, float]
    total_colored_area: float
    remaining_area: float
    over_allocated_area: float = 0.0
    # colors the customer actually picked; courts left blank are coated gray
    # but don't count toward the upcharge
    selected_colors: List[str] = field(default_factory=list)

    @property
    def colors_in_use(self) -> List[str]:
        return [color for color, area in self.color_areas.items() if area > 0]


@dataclass
class ColorCost:
    color: str
    label: str
    material_id: int
    area: float
    gallons: int
    drums: int
    cost: float


@dataclass
class ColorCoatBreakdown:
    areas: ColorAreas
    by_color: List[ColorCost]
    remaining: Optional[ColorCost]
    materials: CostSection
    installation: CostSection
    lining: CostSection
    unique_colors: int
    total: float
    rate_keys: List[RateKey] = field(default_factory=list)


def _add(color_areas: Dict[str, float], selected: List[str], color: Optional[str],
         area: float) -> float:
    """Accumulate a region's area under its color; blank colors go to gray."""
    if area <= 0:
        return 0.0
    key = normalise_color(color)
    if key:
        if key not in selected:
            selected.append(key)
    else:
        key = DEFAULT_COLOR
    color_areas[key] = color_areas.get(key, 0.0) + area
    return area


def partition_color_areas(courts: CourtConfiguration, square_footage: float) -> ColorAreas:
    """
    Assign each court region's area to its chosen color.

    Every court region counts toward the colored total, with or without a
    color. Apron gets max(0, square_footage - court areas). When courts need
    more than the stated square footage the remainder is clamped to 0 and
    the excess is recorded in ``over_allocated_area``.
    """
    courts = courts or CourtConfiguration()
    square_footage = max(0.0, num(square_footage))
    color_areas: Dict[str, float] = {}
    selected: List[str] = []
    total = 0.0

    tennis = int(num(courts.tennis_courts))
    if tennis > 0:
        total += _add(color_areas, selected, courts.tennis_court_color, _area(TENNIS_COURT) * tennis)

    pickleball = int(num(courts.pickleball_courts))
    if pickleball > 0:
        total += _add(color_areas, selected, courts.pickleball_kitchen_color,
                      _area(PICKLEBALL_KITCHEN) * pickleball)
        total += _add(color_areas, selected, courts.pickleball_court_color,
                      _area(PICKLEBALL_COURT) * pickleball)

    basketball = int(num(courts.basketball_courts))
    if basketball > 0:
        full = courts.basketball_court_type == "full"
        area = _area(BASKETBALL_FULL if full else BASKETBALL_HALF) * basketball
        total += _add(color_areas, selected, courts.basketball_court_color, area)

        if normalise_color(courts.basketball_lane_color):
            lanes = _area(BASKETBALL_LANE) * (2 if full else 1) * basketball
            total += _add(color_areas, selected, courts.basketball_lane_color, lanes)

    court_area = total
    if normalise_color(courts.apron_color):
        apron = max(0.0, square_footage - total)
        total += _add(color_areas, selected, courts.apron_color, apron)

    return ColorAreas(
        square_footage=square_footage,
        color_areas=color_areas,
        total_colored_area=total,
        remaining_area=max(0.0, square_footage - total),
        over_allocated_area=max(0.0, court_area - square_footage),
        selected_colors=selected,
    )


def _price_color(color: str, area: float, rates: RateTable) -> ColorCost:
    gallons = gallons_needed(area, COLOR_COAT_WASTE_FACTOR, COATS)
    drums = drums_needed(gallons)
    material_id = color_material_id(color)
    drum_price = rates.get_price_by_id(material_id)
    return ColorCost(
        color=color,
        label=color_label(color),
        material_id=material_id,
        area=area,
        gallons=gallons,
        drums=drums,
        cost=round_money(drums * drum_price + drums * FREIGHT_PER_DRUM),
    )


def _upcharge_id(unique_colors: int) -> Optional[int]:
    # counts every picked color with area, apron included; 5 covers five or more
    if unique_colors < 2:
        return None
    return UPCHARGE_IDS[min(unique_colors, 5)]


def _lining_lines(courts: CourtConfiguration, rates: RateTable) -> List[CostLine]:
    lines: List[CostLine] = []

    tennis = int(num(courts.tennis_courts))
    if tennis > 0:
        lines.append(line("tennis_lines", "Tennis court lines", tennis, "court",
                          rates.get_price_by_id(TENNIS_LINES_ID)))

    pickleball = int(num(courts.pickleball_courts))
    if pickleball > 0:
        lines.append(line("pickleball_lines", "Pickleball court lines", pickleball, "court",
                          rates.get_price_by_id(PICKLEBALL_LINES_ID)))

    basketball = int(num(courts.basketball_courts))
    if basketball > 0:
        full = courts.basketball_court_type == "full"
        if full:
            lines.append(line("basketball_lines", "Basketball lines (full court)", basketball, "court",
                              rates.get_price_by_id(BASKETBALL_FULL_LINES_ID)))
        else:
            lines.append(line("basketball_lines", "Basketball lines (half court)", basketball, "court",
                              rates.get_price_by_id(BASKETBALL_HALF_LINES_ID)))

        selected = set(courts.basketball_three_point_lines or ())
        # a full court has an arc at each end
        arcs = basketball * (2 if full else 1)
        for style, rate_id in THREE_POINT_LINE_IDS.items():
            if style in selected:
                lines.append(line(f"three_point_{style}", f"Three-point arc ({style})", arcs, "arc",
                                  rates.get_price_by_id(rate_id)))

    return lines


def calculate_color_coat(
    courts: CourtConfiguration,
    square_footage: float,
    rates: RateTable,
) -> ColorCoatBreakdown:
    courts = courts or CourtConfiguration()
    areas = partition_color_areas(courts, square_footage)
    square_footage = areas.square_footage

    by_color = [_price_color(color, area, rates) for color, area in areas.color_areas.items()]
    remaining = None
    if areas.remaining_area > 0:
        remaining = _price_color(DEFAULT_COLOR, areas.remaining_area, rates)

    material_lines = [
        line(f"color_{cost.color}", f"{cost.label} color coat", cost.drums, "drum",
             rates.get_price_by_id(cost.material_id), subtotal=cost.cost)
        for cost in by_color
    ]
    if remaining:
        material_lines.append(
            line("color_remaining", "Unassigned area (gray)", remaining.drums, "drum",
                 rates.get_price_by_id(remaining.material_id), subtotal=remaining.cost)
        )
    materials = CostSection.build("Color coat materials", material_lines)

    unique_colors = len(areas.selected_colors)
    installation_lines = [
        line("color_installation", "Color coat installation - (2) coats", square_footage, "sq ft",
             rates.get_price_by_id(INSTALLATION_ID)),
    ]
    upcharge_id = _upcharge_id(unique_colors)
    if upcharge_id is not None:
        installation_lines.append(
            line("color_upcharge", f"{unique_colors} color upcharge", square_footage, "sq ft",
                 rates.get_price_by_id(upcharge_id))
        )
    installation = CostSection.build("Color coat installation", installation_lines)

    lining = CostSection.build("Line painting", _lining_lines(courts, rates))

    total = round_money(materials.subtotal + installation.subtotal + lining.subtotal)
    logger.debug(
        "Color coat: %d colors over %.0f sq ft (remaining %.0f), total %.2f",
        unique_colors, square_footage, areas.remaining_area, total,
    )

    rate_keys: List[RateKey] = [cost.material_id for cost in by_color]
    if remaining:
        rate_keys.append(remaining.material_id)
    if square_footage > 0:
        rate_keys.append(INSTALLATION_ID)
    if upcharge_id is not None:
        rate_keys.append(upcharge_id)
    rate_keys.extend(_lining_rate_keys(courts))

    return ColorCoatBreakdown(
        areas=areas,
        by_color=by_color,
        remaining=remaining,
        materials=materials,
        installation=installation,
        lining=lining,
        unique_colors=unique_colors,
        total=total,
        rate_keys=rate_keys,
    )


def _lining_rate_keys(courts: CourtConfiguration) -> List[RateKey]:
    keys: List[RateKey] = []
    if num(courts.tennis_courts) > 0:
        keys.append(TENNIS_LINES_ID)
    if num(courts.pickleball_courts) > 0:
        keys.append(PICKLEBALL_LINES_ID)
    if num(courts.basketball_courts) > 0:
        full = courts.basketball_court_type == "full"
        keys.append(BASKETBALL_FULL_LINES_ID if full else BASKETBALL_HALF_LINES_ID)
        selected = set(courts.basketball_three_point_lines or ())
        keys.extend(rate_id for style, rate_id in THREE_POINT_LINE_IDS.items() if style in selected)
    return keys
