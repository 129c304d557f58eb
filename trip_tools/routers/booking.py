from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ..booking import BookingClient, HotelFilters, Occupancy, SortBy
from ..currency.codes import CurrencyCode
from ..dates import assert_valid_date_range
from ..deps import get_api_key, get_booking_client
from ..errors import ExternalProviderError, ValidationError
from ..models import Hotel


router = APIRouter(dependencies=[Depends(get_api_key)])


class HotelSearchRequest(BaseModel):
    destination: str
    check_in: str
    check_out: str
    adults: int = Field(2, ge=1)
    rooms: int = Field(1, ge=1)
    currency: CurrencyCode
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, gt=0)
    sort_by: SortBy = "popularity"


class HotelSearchResponse(BaseModel):
    currency: str
    nights: int
    hotels: List[Hotel]


@router.post("/search", response_model=HotelSearchResponse)
async def search(req: HotelSearchRequest, booking: BookingClient = Depends(get_booking_client)) -> HotelSearchResponse:
    try:
        date_range = assert_valid_date_range(req.check_in, req.check_out)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    try:
        hotels = await booking.search(
            req.destination,
            date_range,
            Occupancy(adults=req.adults, rooms=req.rooms),
            req.currency,
            HotelFilters(min_price=req.min_price, max_price=req.max_price, sort_by=req.sort_by),
        )
    except ExternalProviderError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    return HotelSearchResponse(currency=str(req.currency), nights=date_range.nights, hotels=hotels)
