# court_estimator/labor.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from court_estimator.models import (
    DEFAULT_LOGISTICS,
    CostLine,
    CostSection,
    LogisticsSpec,
    line,
    num,
    round_money,
)
from court_estimator.rate_table import RateKey, RateTable

logger = logging.getLogger(__name__)


GENERAL_LABOR = "General Labor Rate"  # per hour
HOURS_PER_DAY = 8
MILEAGE_RATE = 0.63  # IRS standard rate, per mile
DEFAULT_HOTEL_RATE = 150.0
CREW_SIZE = 2
PER_DIEM_RATE = 50.0  # per person per day


@dataclass
class LaborBreakdown:
    labor_rate: float
    days: float
    trips: int
    standard_hours: float
    additional_hours: float
    installation_hours: float
    total_miles: float
    hotel_nights: float
    labor: CostSection
    travel: CostSection
    total: float
    notes: str = ""
    rate_keys: List[RateKey] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return self.standard_hours + self.additional_hours + self.installation_hours


def calculate_labor(
    logistics: Optional[LogisticsSpec],
    rates: RateTable,
    installation_hours: float = 0.0,
) -> LaborBreakdown:
    """
    Crew labor and travel for a job.

      standard labor   days x 8 h x rate
      additional       general labor hours x rate
      installation     installation hours x rate
      mileage          distance x 2 (round trip) x trips x $0.63
      hotel            max(0, days - 1) nights per trip x nightly rate
      per diem         days x trips x 2 crew x $50

    Missing logistics fall back to DEFAULT_LOGISTICS; missing numbers count
    as zero, except trips (1) and hotel rate ($150).
    """
    logistics = logistics or DEFAULT_LOGISTICS
    labor_rate = rates.get_price_by_name(GENERAL_LABOR)

    days = max(0.0, num(logistics.travel_days))
    trips = int(num(logistics.number_of_trips)) or 1
    distance = max(0.0, num(logistics.distance_to_site))
    hotel_rate = num(logistics.hotel_rate) or DEFAULT_HOTEL_RATE

    standard_hours = days * HOURS_PER_DAY
    additional_hours = max(0.0, num(logistics.general_labor_hours))
    installation_hours = max(0.0, num(installation_hours))

    labor_lines: List[CostLine] = [
        line("standard_labor", "Standard labor", standard_hours, "hr", labor_rate),
        line("additional_labor", "Additional general labor", additional_hours, "hr", labor_rate),
    ]
    if installation_hours:
        labor_lines.append(
            line("installation_labor", "Installation labor", installation_hours, "hr", labor_rate)
        )
    labor = CostSection.build("Labor", labor_lines)

    total_miles = distance * 2 * trips
    hotel_nights = max(0.0, days - 1) * trips
    per_diem_days = days * trips

    travel = CostSection.build("Travel", [
        line("mileage", "Mileage (round trip)", total_miles, "mi", MILEAGE_RATE),
        line("hotel", "Hotel", hotel_nights, "night", hotel_rate),
        line("per_diem", f"Per diem ({CREW_SIZE} crew)", per_diem_days, "day",
             PER_DIEM_RATE * CREW_SIZE),
    ])

    total = round_money(labor.subtotal + travel.subtotal)
    logger.debug("Labor: %.1f h at %.2f, %d trip(s), total %.2f",
                 standard_hours + additional_hours + installation_hours, labor_rate, trips, total)

    return LaborBreakdown(
        labor_rate=labor_rate,
        days=days,
        trips=trips,
        standard_hours=standard_hours,
        additional_hours=additional_hours,
        installation_hours=installation_hours,
        total_miles=total_miles,
        hotel_nights=hotel_nights,
        labor=labor,
        travel=travel,
        total=total,
        notes=logistics.logistical_notes or "",
        rate_keys=[GENERAL_LABOR] if (standard_hours or additional_hours or installation_hours) else [],
    )
