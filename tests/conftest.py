# tests/conftest.py
from pathlib import Path

import pytest

from court_estimator.rate_table import RateTable, rate_table_from_records

SAMPLE_RATES = Path(__file__).resolve().parent.parent / "samples" / "rates.csv"


RATE_RECORDS = [
    {"id": 1, "name": "Pressure Washing", "category": "services", "value": 0.10, "unit": "sq ft"},
    {"id": 2, "name": "Acid Wash (Concrete Only)", "category": "services", "value": 0.50, "unit": "sq ft"},
    {"id": 3, "name": "Court Patch Binder - Materials", "category": "materials", "value": 125},
    {"id": 4, "name": "Sand", "category": "materials", "value": 15},
    {"id": 5, "name": "Cement", "category": "materials", "value": 96},
    {"id": 6, "name": "Minor Crack Repair (Filling and Sealing)", "category": "services", "value": 45},
    {"id": 7, "name": "Major Crack Repair (Filling and Sealing)", "category": "services", "value": 65},
    {"id": 12, "name": "General Labor Rate", "category": "services", "value": 65, "unit": "hour"},
    {"id": 20, "name": "Acrylic Resurfacer - Material", "category": "materials", "value": 10, "unit": "gal"},
    {"id": 50, "name": "Acrylic Resurfacer - (2) Coats", "category": "services", "value": 0.20},
    {"id": 21, "name": "Color Coat - Dark Blue", "category": "materials", "value": 600, "unit": "drum"},
    {"id": 56, "name": "Color Coat - Gray", "category": "materials", "value": 500, "unit": "drum"},
    {"id": 61, "name": "Color Coat - Red", "category": "materials", "value": 650, "unit": "drum"},
    {"id": 64, "name": "Color Coat Installation - (2) Coats", "category": "services", "value": 0.20},
    {"id": 65, "name": "2 Color Upcharge", "category": "services", "value": 0.05},
    {"id": 66, "name": "3 Color Upcharge", "category": "services", "value": 0.10},
    {"id": 69, "name": "Tennis Court Lining", "category": "services", "value": 725},
    {"id": 70, "name": "Pickleball Lines", "category": "services", "value": 600},
    {"id": 71, "name": "Basketball Lines - Half Court", "category": "services", "value": 750},
    {"id": 72, "name": "Basketball Lines - Full Court", "category": "services", "value": 1000},
    {"id": 73, "name": "Three Point Line - High School", "category": "services", "value": 250},
    {"id": 74, "name": "Three Point Line - NBA", "category": "services", "value": 300},
    {"id": 75, "name": "Three Point Line - College", "category": "services", "value": 275},
    {"id": 30, "name": "Permanent Tennis Posts", "category": "equipment", "value": 500},
    {"id": 31, "name": "Permanent Pickleball Posts", "category": "equipment", "value": 400},
    {"id": 32, "name": "Mobile Pickleball Nets", "category": "equipment", "value": 400},
    {"id": 33, "name": 'Basketball System - Adjustable 60"', "category": "equipment", "value": 1500},
    {"id": 34, "name": 'Basketball System - Adjustable 72"', "category": "equipment", "value": 1900},
    {"id": 35, "name": "Basketball System - Fixed", "category": "equipment", "value": 1200},
    {"id": 36, "name": "Standard Windscreen", "category": "equipment", "value": 3},
    {"id": 37, "name": "High-Grade Windscreen", "category": "equipment", "value": 5},
    {"id": 38, "name": "Hole Cutting", "category": "services", "value": 500},
    {"id": 39, "name": "Concrete Per Hole", "category": "materials", "value": 50},
    {"id": 40, "name": "Windscreen Installation", "category": "services", "value": 1},
]


@pytest.fixture
def rates() -> RateTable:
    return rate_table_from_records(RATE_RECORDS)


@pytest.fixture
def empty_rates() -> RateTable:
    return RateTable()
