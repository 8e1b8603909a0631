# court_estimator/models.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


def num(value: Any) -> float:
    """
    Coerce an optional numeric input to float.

    None, blanks and anything non-numeric become 0.0 so a half-filled form
    still produces an estimate.
    """
    if value is None or value == "":
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result):
        return 0.0
    return result


# ---------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------

@dataclass
class ProjectDimensions:
    length: float = 0.0
    width: float = 0.0
    square_footage: float = 0.0

    @classmethod
    def from_length_width(cls, length: float, width: float) -> "ProjectDimensions":
        return cls(length=length, width=width, square_footage=num(length) * num(width))

    @property
    def area(self) -> float:
        """Square footage when given, otherwise length x width."""
        square_footage = num(self.square_footage)
        if square_footage > 0:
            return square_footage
        return num(self.length) * num(self.width)


@dataclass
class PatchWork:
    needed: bool = False
    estimated_gallons: float = 0.0
    minor_crack_gallons: float = 0.0
    major_crack_gallons: float = 0.0


@dataclass
class SurfaceSystemSpec:
    needs_pressure_wash: bool = False
    needs_acid_wash: bool = False
    patch_work: PatchWork = field(default_factory=PatchWork)
    fiberglass_mesh_needed: bool = False
    fiberglass_mesh_area: float = 0.0
    cushion_system_needed: bool = False
    cushion_system_area: float = 0.0


@dataclass
class CourtConfiguration:
    tennis_courts: int = 0
    tennis_court_color: Optional[str] = None
    pickleball_courts: int = 0
    pickleball_kitchen_color: Optional[str] = None
    pickleball_court_color: Optional[str] = None
    basketball_courts: int = 0
    basketball_court_type: str = "half"  # "half" or "full"
    basketball_court_color: Optional[str] = None
    basketball_lane_color: Optional[str] = None
    basketball_three_point_lines: Tuple[str, ...] = ()  # "high-school", "college", "nba"
    apron_color: Optional[str] = None

    def __post_init__(self) -> None:
        styles = self.basketball_three_point_lines or ()
        if isinstance(styles, str):
            styles = (styles,)
        self.basketball_three_point_lines = tuple(s.strip().lower() for s in styles if s and s.strip())


@dataclass
class EquipmentSpec:
    tennis_post_sets: int = 0
    tennis_posts_installation: bool = False
    pickleball_post_sets: int = 0
    pickleball_posts_installation: bool = False
    mobile_pickleball_nets: int = 0
    basketball_60_count: int = 0
    basketball_72_count: int = 0
    basketball_fixed_count: int = 0
    basketball_installation: bool = False
    standard_windscreen: float = 0.0  # linear feet
    high_grade_windscreen: float = 0.0  # linear feet
    windscreen_installation: bool = False


@dataclass(frozen=True)
class LogisticsSpec:
    travel_days: float = 2
    number_of_trips: int = 1
    distance_to_site: float = 0.0  # miles, one way
    general_labor_hours: float = 0.0
    hotel_rate: float = 150.0
    logistical_notes: str = ""


DEFAULT_LOGISTICS = LogisticsSpec()


# ---------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------

def round_money(value: float) -> float:
    return round(value, 2)


@dataclass
class CostLine:
    key: str
    description: str
    quantity: float
    unit: str
    unit_cost: float
    subtotal: float


@dataclass
class CostSection:
    name: str
    lines: List[CostLine]
    subtotal: float

    @classmethod
    def build(cls, name: str, lines: List[CostLine]) -> "CostSection":
        return cls(
            name=name,
            lines=lines,
            subtotal=round_money(sum(line.subtotal for line in lines)),
        )

    def visible_lines(self) -> List[CostLine]:
        """Lines worth showing on a quote; zero lines still count in the subtotal."""
        return [line for line in self.lines if line.subtotal or line.quantity]


def line(key: str, description: str, quantity: float, unit: str,
         unit_cost: float, subtotal: Optional[float] = None) -> CostLine:
    """Build a CostLine; the subtotal defaults to quantity x unit_cost."""
    if subtotal is None:
        subtotal = quantity * unit_cost
    return CostLine(
        key=key,
        description=description,
        quantity=quantity,
        unit=unit,
        unit_cost=unit_cost,
        subtotal=round_money(subtotal),
    )
