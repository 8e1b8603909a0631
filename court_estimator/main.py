# court_estimator/main.py
from __future__ import annotations

import base64
import io
import json
import logging
import os
from dataclasses import asdict
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field, field_validator

from court_estimator import config
from court_estimator.color_coat import calculate_color_coat
from court_estimator.equipment import calculate_equipment
from court_estimator.estimator import CourtEstimate, ProjectInput, calculate_estimate, summarize
from court_estimator.labor import calculate_labor
from court_estimator.materials import calculate_materials
from court_estimator.models import (
    CourtConfiguration,
    EquipmentSpec,
    LogisticsSpec,
    PatchWork,
    ProjectDimensions,
    SurfaceSystemSpec,
)
from court_estimator.quote import render_quote
from court_estimator.rate_table import RateTable, load_rate_table

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Court Estimator")


class DimensionsModel(BaseModel):
    length: float = Field(0, ge=0)
    width: float = Field(0, ge=0)
    square_footage: float = Field(0, ge=0)


class PatchWorkModel(BaseModel):
    needed: bool = False
    estimated_gallons: float = Field(0, ge=0)
    minor_crack_gallons: float = Field(0, ge=0)
    major_crack_gallons: float = Field(0, ge=0)


class SurfaceSystemModel(BaseModel):
    needs_pressure_wash: bool = False
    needs_acid_wash: bool = False
    patch_work: PatchWorkModel = Field(default_factory=PatchWorkModel)
    fiberglass_mesh_needed: bool = False
    fiberglass_mesh_area: float = Field(0, ge=0)
    cushion_system_needed: bool = False
    cushion_system_area: float = Field(0, ge=0)


class CourtConfigurationModel(BaseModel):
    tennis_courts: int = Field(0, ge=0)
    tennis_court_color: Optional[str] = None
    pickleball_courts: int = Field(0, ge=0)
    pickleball_kitchen_color: Optional[str] = None
    pickleball_court_color: Optional[str] = None
    basketball_courts: int = Field(0, ge=0)
    basketball_court_type: Literal["half", "full"] = "half"
    basketball_court_color: Optional[str] = None
    basketball_lane_color: Optional[str] = None
    basketball_three_point_lines: List[Literal["high-school", "college", "nba"]] = []
    apron_color: Optional[str] = None


class EquipmentModel(BaseModel):
    tennis_post_sets: int = Field(0, ge=0)
    tennis_posts_installation: bool = False
    pickleball_post_sets: int = Field(0, ge=0)
    pickleball_posts_installation: bool = False
    mobile_pickleball_nets: int = Field(0, ge=0)
    basketball_60_count: int = Field(0, ge=0)
    basketball_72_count: int = Field(0, ge=0)
    basketball_fixed_count: int = Field(0, ge=0)
    basketball_installation: bool = False
    standard_windscreen: float = Field(0, ge=0)
    high_grade_windscreen: float = Field(0, ge=0)
    windscreen_installation: bool = False


class LogisticsModel(BaseModel):
    travel_days: float = Field(2, ge=0)
    number_of_trips: int = Field(1, ge=0)
    distance_to_site: float = Field(0, ge=0)
    general_labor_hours: float = Field(0, ge=0)
    hotel_rate: float = Field(150, ge=0)
    logistical_notes: str = ""


def _parse_logistics(value):
    """Logistics may arrive as an object or as a JSON-encoded string."""
    if isinstance(value, str):
        try:
            value = json.loads(value) if value.strip() else None
        except ValueError:
            logger.warning("Ignoring malformed logistics JSON, using defaults")
            return None
        if not isinstance(value, dict):
            return None
    return value


class EstimateRequest(BaseModel):
    dimensions: DimensionsModel = Field(default_factory=DimensionsModel)
    surface: SurfaceSystemModel = Field(default_factory=SurfaceSystemModel)
    courts: CourtConfigurationModel = Field(default_factory=CourtConfigurationModel)
    equipment: EquipmentModel = Field(default_factory=EquipmentModel)
    logistics: Optional[LogisticsModel] = None
    tax_rate: Optional[float] = Field(None, ge=0)
    margin_rate: Optional[float] = Field(None, ge=0)
    customer_name: Optional[str] = None
    project_name: Optional[str] = None
    include_quote: bool = False

    @field_validator("logistics", mode="before")
    @classmethod
    def logistics_from_string(cls, value):
        return _parse_logistics(value)


class MaterialsRequest(BaseModel):
    dimensions: DimensionsModel = Field(default_factory=DimensionsModel)
    surface: SurfaceSystemModel = Field(default_factory=SurfaceSystemModel)


class ColorCoatRequest(BaseModel):
    dimensions: DimensionsModel = Field(default_factory=DimensionsModel)
    courts: CourtConfigurationModel = Field(default_factory=CourtConfigurationModel)


class LaborRequest(BaseModel):
    logistics: Optional[LogisticsModel] = None
    installation_hours: float = Field(0, ge=0)

    @field_validator("logistics", mode="before")
    @classmethod
    def logistics_from_string(cls, value):
        return _parse_logistics(value)


def _dimensions(model: DimensionsModel) -> ProjectDimensions:
    return ProjectDimensions(**model.model_dump())


def _surface(model: SurfaceSystemModel) -> SurfaceSystemSpec:
    data = model.model_dump()
    data["patch_work"] = PatchWork(**data["patch_work"])
    return SurfaceSystemSpec(**data)


def _courts(model: CourtConfigurationModel) -> CourtConfiguration:
    data = model.model_dump()
    data["basketball_three_point_lines"] = tuple(data["basketball_three_point_lines"])
    return CourtConfiguration(**data)


def _equipment(model: EquipmentModel) -> EquipmentSpec:
    return EquipmentSpec(**model.model_dump())


def _logistics(model: Optional[LogisticsModel]) -> Optional[LogisticsSpec]:
    return LogisticsSpec(**model.model_dump()) if model else None


def _load_rate_table_for_app() -> RateTable:
    """
    Locate and load the rate table for the API.

    - Use RATES_PATH if set.
    - Otherwise try ./rates.csv then ./samples/rates.csv
    """
    candidates = []
    if config.RATES_PATH:
        candidates.append(config.RATES_PATH)
    candidates.extend(["rates.csv", os.path.join("samples", "rates.csv")])

    for candidate in candidates:
        if candidate and os.path.exists(candidate):
            return load_rate_table(candidate)

    raise RuntimeError(
        "No rate table CSV found. Set RATES_PATH or add rates.csv."
    )


@app.on_event("startup")
def startup_event() -> None:
    app.state.rate_table = _load_rate_table_for_app()


def _ensure_rate_table() -> RateTable:
    rate_table = getattr(app.state, "rate_table", None)
    if not rate_table:
        raise HTTPException(status_code=500, detail="Rate table is not loaded")
    return rate_table


def _project(request: EstimateRequest) -> ProjectInput:
    project = ProjectInput(
        dimensions=_dimensions(request.dimensions),
        surface=_surface(request.surface),
        courts=_courts(request.courts),
        equipment=_equipment(request.equipment),
    )
    logistics = _logistics(request.logistics)
    if logistics:
        project.logistics = logistics
    return project


def _estimate(request: EstimateRequest) -> CourtEstimate:
    rate_table = _ensure_rate_table()
    tax_rate = request.tax_rate if request.tax_rate is not None else config.TAX_RATE
    margin_rate = request.margin_rate if request.margin_rate is not None else config.MARGIN_RATE

    try:
        estimate = calculate_estimate(
            _project(request),
            rate_table,
            tax_rate=tax_rate,
            margin_rate=margin_rate,
        )
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    logger.info("Estimate computed: %s", summarize(estimate))
    return estimate


@app.get("/rates")
def list_rates(category: Optional[str] = None):
    rate_table = _ensure_rate_table()
    records = rate_table.get_prices_by_category(category) if category else rate_table.records
    return [asdict(record) for record in records]


@app.post("/estimate")
def create_estimate(request: EstimateRequest):
    estimate = _estimate(request)
    payload = asdict(estimate)
    payload["degraded"] = estimate.degraded

    if request.include_quote:
        quote_bytes = render_quote(
            estimate,
            customer_name=request.customer_name,
            project_name=request.project_name,
        )
        payload["quote_base64"] = base64.b64encode(quote_bytes).decode("ascii")

    return payload


@app.post("/quote")
def create_quote(request: EstimateRequest):
    estimate = _estimate(request)
    quote_bytes = render_quote(
        estimate,
        customer_name=request.customer_name,
        project_name=request.project_name,
    )

    return StreamingResponse(
        io.BytesIO(quote_bytes),
        media_type="text/plain",
        headers={"Content-Disposition": 'attachment; filename="quote.txt"'},
    )


@app.post("/estimate/materials")
def estimate_materials(request: MaterialsRequest):
    breakdown = calculate_materials(
        _surface(request.surface), _dimensions(request.dimensions), _ensure_rate_table()
    )
    return asdict(breakdown)


@app.post("/estimate/color-coat")
def estimate_color_coat(request: ColorCoatRequest):
    breakdown = calculate_color_coat(
        _courts(request.courts), _dimensions(request.dimensions).area, _ensure_rate_table()
    )
    return asdict(breakdown)


@app.post("/estimate/equipment")
def estimate_equipment(request: EquipmentModel):
    breakdown = calculate_equipment(_equipment(request), _ensure_rate_table())
    return asdict(breakdown)


@app.post("/estimate/labor")
def estimate_labor(request: LaborRequest):
    breakdown = calculate_labor(
        _logistics(request.logistics), _ensure_rate_table(), request.installation_hours
    )
    return asdict(breakdown)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("court_estimator.main:app", host="0.0.0.0", port=8000, reload=True)
