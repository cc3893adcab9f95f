import logging
from contextlib import asynccontextmanager
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from margin_tool import __version__
from margin_tool.config.logging_config import setup_logging
from margin_tool.config.settings import get_settings
from margin_tool.engine import PricingRecord, derive, derivation_basis, labour_defaults, purchases_defaults
from margin_tool.engine.formatting import round_for_display
from margin_tool.services.calculator_session import (
    CalculatorSession,
    ValidationError,
    MSG_MARGIN_TOO_HIGH,
    MSG_NON_FINITE,
)

logger = logging.getLogger(__name__)

FieldName = Literal['cost', 'markup', 'profit', 'charge', 'margin']


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Margin Tool API %s starting", __version__)
    yield


app = FastAPI(
    title="Margin Tool API",
    description="Derives cost, markup, profit, charge and margin from cost plus one known field",
    version=__version__,
    lifespan=lifespan,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class DeriveRequest(BaseModel):
    cost: float = Field(default=0.0, allow_inf_nan=False)
    markup: float = Field(default=0.0, allow_inf_nan=False)
    profit: float = Field(default=0.0, allow_inf_nan=False)
    charge: float = Field(default=0.0, allow_inf_nan=False)
    margin: float = Field(default=0.0, allow_inf_nan=False)
    known_field: Optional[FieldName] = None


class RecordResponse(BaseModel):
    cost: float
    markup: float
    profit: float
    charge: float
    margin: float


class DeriveResponse(BaseModel):
    record: RecordResponse
    display: RecordResponse
    basis: Optional[str] = None


class LabourEntry(BaseModel):
    """Labour cost plus the most recently entered other field."""
    cost: float = Field(allow_inf_nan=False)
    field: FieldName
    value: float = Field(allow_inf_nan=False)


class PurchasesEntry(BaseModel):
    field: FieldName
    value: float = Field(allow_inf_nan=False)


class CalculateRequest(BaseModel):
    labour: LabourEntry
    purchases: PurchasesEntry
    is_day: bool = Field(default=False, description="Labour currency values are per day")


class CalculateResponse(BaseModel):
    labour: DeriveResponse
    purchases: DeriveResponse


def _record_payload(record: PricingRecord, basis: Optional[str]) -> DeriveResponse:
    return DeriveResponse(
        record=RecordResponse(**record.to_dict()),
        display=RecordResponse(**round_for_display(record).to_dict()),
        basis=basis,
    )


@app.get("/")
async def root():
    return {"status": "online", "message": "Margin Tool API Active"}


@app.post("/derive", response_model=DeriveResponse)
async def derive_record(req: DeriveRequest):
    record = PricingRecord.from_dict(req.model_dump(exclude={'known_field'}))
    basis = derivation_basis(record, req.known_field)
    if basis == 'margin' and record.margin >= 100:
        raise HTTPException(status_code=422, detail=MSG_MARGIN_TOO_HIGH)
    try:
        result = derive(record, known_field=req.known_field)
    except Exception as e:
        logger.exception("Derivation failed")
        raise HTTPException(status_code=500, detail=str(e))
    if not result.is_finite():
        raise HTTPException(status_code=422, detail=MSG_NON_FINITE)
    return _record_payload(result, basis)


@app.post("/calculate", response_model=CalculateResponse)
async def calculate(req: CalculateRequest):
    """Replay the calculator screen: enter labour cost and one field, one purchases field, calculate."""
    session = CalculatorSession()
    session.set_day_mode(req.is_day)
    try:
        session.enter_labour('cost', req.labour.cost)
        session.enter_labour(req.labour.field, req.labour.value)
        session.enter_purchases(req.purchases.field, req.purchases.value)
        labour, purchases = session.calculate()
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except Exception as e:
        logger.exception("Calculation failed")
        raise HTTPException(status_code=500, detail=str(e))

    return CalculateResponse(
        labour=_record_payload(session.display_labour(), derivation_basis(labour, session.last_labour_field)),
        purchases=_record_payload(purchases, derivation_basis(purchases, session.last_purchases_field)),
    )


@app.get("/defaults")
async def get_defaults():
    settings = get_settings()
    return {
        "labour": labour_defaults().to_dict(),
        "purchases": purchases_defaults(settings.purchase_cost).to_dict(),
    }


@app.get("/system/status")
async def get_status():
    settings = get_settings()
    return {
        "engine_active": True,
        "version": __version__,
        "hours_per_day": settings.hours_per_day,
        "purchase_cost": settings.purchase_cost,
        "percent_decimals": settings.percent_decimals,
        "currency_decimals": settings.currency_decimals,
    }
