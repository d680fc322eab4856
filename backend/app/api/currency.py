"""Currency rates and conversion endpoints."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from backend.app.adapters.fx import CurrencyService, get_currency_service

router = APIRouter(prefix="/currency", tags=["currency"])


class RatesResponse(BaseModel):
    """Rate table for a base currency."""

    base: str
    rates: dict[str, float]


class ConversionResponse(BaseModel):
    """Result of a conversion."""

    model_config = ConfigDict(populate_by_name=True)

    amount: float
    from_currency: str = Field(alias="from")
    to_currency: str = Field(alias="to")
    result: float


@router.get("/rates", response_model=RatesResponse)
def get_rates(
    base: str = Query("EUR", min_length=3, max_length=3),
    currency_service: CurrencyService = Depends(get_currency_service),
) -> RatesResponse:
    """Exchange rates for ``base`` (fallback table if the provider is down)."""
    base = base.upper()
    return RatesResponse(base=base, rates=currency_service.get_rates(base))


@router.get("/convert", response_model=ConversionResponse, response_model_by_alias=True)
def convert(
    amount: float = Query(...),
    from_currency: str = Query(..., alias="from", min_length=3, max_length=3),
    to_currency: str = Query(..., alias="to", min_length=3, max_length=3),
    currency_service: CurrencyService = Depends(get_currency_service),
) -> ConversionResponse:
    """Convert an amount between two currencies."""
    return ConversionResponse(
        amount=amount,
        from_currency=from_currency.upper(),
        to_currency=to_currency.upper(),
        result=currency_service.convert_currency(amount, from_currency, to_currency),
    )
