from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_api_key, get_pipeline
from ..geocoding import GeocodingPipeline


router = APIRouter(dependencies=[Depends(get_api_key)])


class GeocodeRequest(BaseModel):
    locations: List[str] = Field(..., min_length=1, max_length=25)
    country_hint: Optional[str] = None


class GeocodedLocation(BaseModel):
    name: str
    lat: float
    lng: float
    address: Optional[str] = None
    placeId: Optional[str] = None


class GeocodeResponse(BaseModel):
    locations: List[GeocodedLocation]
    resolved: int
    total: int


@router.post("/geocode", response_model=GeocodeResponse)
async def geocode(req: GeocodeRequest, pipeline: GeocodingPipeline = Depends(get_pipeline)) -> GeocodeResponse:
    results = await pipeline.geocode_locations(req.locations, req.country_hint)
    items = [GeocodedLocation(**r) for r in results]
    resolved = sum(1 for i in items if not (i.lat == 0 and i.lng == 0))
    return GeocodeResponse(locations=items, resolved=resolved, total=len(items))
