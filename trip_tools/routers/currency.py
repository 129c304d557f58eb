from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ..catalog import convert as convert_amount, rate
from ..currency.resolver import CurrencyContext, resolve
from ..deps import get_api_key
from ..errors import ValidationError


router = APIRouter(dependencies=[Depends(get_api_key)])


class ResolveRequest(BaseModel):
    override: Optional[str] = None
    country: Optional[str] = None


@router.post("/resolve", response_model=CurrencyContext, response_model_by_alias=True)
async def resolve_currency(req: ResolveRequest) -> CurrencyContext:
    return resolve(override=req.override, geo=req.country)


class ConvertRequest(BaseModel):
    amount: float
    from_currency: str = Field(..., alias="from")
    to_currency: str = Field(..., alias="to")

    class Config:
        populate_by_name = True


class ConvertResponse(BaseModel):
    rate: float
    converted: float


@router.post("/convert", response_model=ConvertResponse)
async def convert(req: ConvertRequest) -> ConvertResponse:
    try:
        converted = convert_amount(req.amount, req.from_currency, req.to_currency)
        fx_rate = rate(req.to_currency) / rate(req.from_currency)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return ConvertResponse(rate=fx_rate, converted=round(converted, 2))
