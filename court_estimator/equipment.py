# court_estimator/equipment.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from court_estimator.models import CostLine, EquipmentSpec, line, num, round_money
from court_estimator.rate_table import RateKey, RateTable

logger = logging.getLogger(__name__)


TENNIS_POSTS = "Permanent Tennis Posts"  # per set
PICKLEBALL_POSTS = "Permanent Pickleball Posts"  # per set
MOBILE_NETS = "Mobile Pickleball Nets"
BASKETBALL_60 = 'Basketball System - Adjustable 60"'
BASKETBALL_72 = 'Basketball System - Adjustable 72"'
BASKETBALL_FIXED = "Basketball System - Fixed"
STANDARD_WINDSCREEN = "Standard Windscreen"  # per linear foot
HIGH_GRADE_WINDSCREEN = "High-Grade Windscreen"  # per linear foot

HOLE_CUTTING = "Hole Cutting"  # per hole
CONCRETE_PER_HOLE = "Concrete Per Hole"
WINDSCREEN_INSTALLATION = "Windscreen Installation"  # per linear foot
GENERAL_LABOR = "General Labor Rate"  # per hour

HOLES_PER_POST_SET = 2
HOLES_PER_HOOP = 1
INSTALL_HOURS = {
    "tennis_posts": 2.0,
    "pickleball_posts": 1.5,
    "basketball": 4.0,
}


@dataclass
class EquipmentCategory:
    key: str
    label: str
    quantity: float
    unit: str
    equipment: CostLine
    installation: List[CostLine]
    installation_needed: bool
    holes: int
    installation_hours: float
    total: float

    @property
    def present(self) -> bool:
        """Zero-count categories are still computed but not displayed."""
        return self.quantity > 0

    @property
    def installation_total(self) -> float:
        return round_money(sum(item.subtotal for item in self.installation))


@dataclass
class EquipmentBreakdown:
    categories: List[EquipmentCategory]
    equipment_total: float
    installation_total: float
    total: float
    total_holes: int
    total_installation_hours: float
    rate_keys: List[RateKey] = field(default_factory=list)

    def category(self, key: str) -> EquipmentCategory:
        for category in self.categories:
            if category.key == key:
                return category
        raise KeyError(f"No equipment category '{key}'")

    @property
    def present(self) -> List[EquipmentCategory]:
        return [c for c in self.categories if c.present]


def _footer_installation(key: str, count: float, holes_per_unit: int, hours_per_unit: float,
                         rates: RateTable) -> tuple:
    """Footer installation: holes cut, concrete per hole and crew hours."""
    holes = int(count) * holes_per_unit
    hours = count * hours_per_unit
    lines = [
        line(f"{key}_holes", "Hole cutting", holes, "hole", rates.get_price_by_name(HOLE_CUTTING)),
        line(f"{key}_concrete", "Concrete", holes, "hole", rates.get_price_by_name(CONCRETE_PER_HOLE)),
        line(f"{key}_labor", "Installation labor", hours, "hr", rates.get_price_by_name(GENERAL_LABOR)),
    ]
    return lines, holes, hours


def _category(key: str, label: str, count: float, unit: str, rate_name: str,
              install: bool, rates: RateTable, holes_per_unit: int = 0,
              hours_per_unit: float = 0.0, per_foot_install: bool = False) -> EquipmentCategory:
    equipment = line(key, label, count, unit, rates.get_price_by_name(rate_name))

    installation: List[CostLine] = []
    holes = 0
    hours = 0.0
    if install and count > 0:
        if per_foot_install:
            installation = [
                line(f"{key}_installation", "Installation", count, unit,
                     rates.get_price_by_name(WINDSCREEN_INSTALLATION)),
            ]
        else:
            installation, holes, hours = _footer_installation(key, count, holes_per_unit, hours_per_unit, rates)

    total = round_money(equipment.subtotal + sum(item.subtotal for item in installation))
    return EquipmentCategory(
        key=key,
        label=label,
        quantity=count,
        unit=unit,
        equipment=equipment,
        installation=installation,
        installation_needed=install,
        holes=holes,
        installation_hours=hours,
        total=total,
    )


def calculate_equipment(spec: EquipmentSpec, rates: RateTable) -> EquipmentBreakdown:
    """
    Equipment and optional installation per category.

    Installation is only priced when the category's flag is set. Posts and
    hoops are set in concrete footers (hole cutting + concrete + crew hours);
    windscreen installs by the linear foot. Mobile nets never need installing.
    """
    spec = spec or EquipmentSpec()
    hoops_install = bool(spec.basketball_installation)

    categories = [
        _category("tennis_posts", "Tennis posts", num(spec.tennis_post_sets), "set", TENNIS_POSTS,
                  spec.tennis_posts_installation, rates,
                  holes_per_unit=HOLES_PER_POST_SET, hours_per_unit=INSTALL_HOURS["tennis_posts"]),
        _category("pickleball_posts", "Pickleball posts", num(spec.pickleball_post_sets), "set",
                  PICKLEBALL_POSTS, spec.pickleball_posts_installation, rates,
                  holes_per_unit=HOLES_PER_POST_SET, hours_per_unit=INSTALL_HOURS["pickleball_posts"]),
        _category("mobile_nets", "Mobile pickleball nets", num(spec.mobile_pickleball_nets), "unit",
                  MOBILE_NETS, False, rates),
        _category("basketball_60", 'Adjustable basketball system (60")', num(spec.basketball_60_count),
                  "system", BASKETBALL_60, hoops_install, rates,
                  holes_per_unit=HOLES_PER_HOOP, hours_per_unit=INSTALL_HOURS["basketball"]),
        _category("basketball_72", 'Adjustable basketball system (72")', num(spec.basketball_72_count),
                  "system", BASKETBALL_72, hoops_install, rates,
                  holes_per_unit=HOLES_PER_HOOP, hours_per_unit=INSTALL_HOURS["basketball"]),
        _category("basketball_fixed", "Fixed basketball system", num(spec.basketball_fixed_count),
                  "system", BASKETBALL_FIXED, hoops_install, rates,
                  holes_per_unit=HOLES_PER_HOOP, hours_per_unit=INSTALL_HOURS["basketball"]),
        _category("standard_windscreen", "Standard windscreen", num(spec.standard_windscreen), "ft",
                  STANDARD_WINDSCREEN, spec.windscreen_installation, rates, per_foot_install=True),
        _category("high_grade_windscreen", "High-grade windscreen", num(spec.high_grade_windscreen), "ft",
                  HIGH_GRADE_WINDSCREEN, spec.windscreen_installation, rates, per_foot_install=True),
    ]

    equipment_total = round_money(sum(c.equipment.subtotal for c in categories))
    installation_total = round_money(sum(c.installation_total for c in categories))
    total = round_money(equipment_total + installation_total)

    rate_keys: List[RateKey] = []
    rate_names = {
        "tennis_posts": TENNIS_POSTS,
        "pickleball_posts": PICKLEBALL_POSTS,
        "mobile_nets": MOBILE_NETS,
        "basketball_60": BASKETBALL_60,
        "basketball_72": BASKETBALL_72,
        "basketball_fixed": BASKETBALL_FIXED,
        "standard_windscreen": STANDARD_WINDSCREEN,
        "high_grade_windscreen": HIGH_GRADE_WINDSCREEN,
    }
    for c in categories:
        if not c.present:
            continue
        rate_keys.append(rate_names[c.key])
        if c.holes:
            rate_keys.extend([HOLE_CUTTING, CONCRETE_PER_HOLE, GENERAL_LABOR])
        elif c.installation:
            rate_keys.append(WINDSCREEN_INSTALLATION)

    breakdown = EquipmentBreakdown(
        categories=categories,
        equipment_total=equipment_total,
        installation_total=installation_total,
        total=total,
        total_holes=sum(c.holes for c in categories),
        total_installation_hours=sum(c.installation_hours for c in categories),
        rate_keys=list(dict.fromkeys(rate_keys)),
    )
    logger.debug("Equipment: %d categories present, total %.2f", len(breakdown.present), total)
    return breakdown
