from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..dates import DateContext, DateRangeValidation, DateValidation, date_context, validate_date, validate_date_range
from ..deps import get_api_key


router = APIRouter(dependencies=[Depends(get_api_key)])


class ValidateRequest(BaseModel):
    date: str


class ValidateRangeRequest(BaseModel):
    check_in: str
    check_out: str


@router.get("/today", response_model=DateContext)
async def today() -> DateContext:
    return date_context()


@router.post("/validate", response_model=DateValidation)
async def validate(req: ValidateRequest) -> DateValidation:
    return validate_date(req.date)


@router.post("/validate-range", response_model=DateRangeValidation)
async def validate_range(req: ValidateRangeRequest) -> DateRangeValidation:
    return validate_date_range(req.check_in, req.check_out)
