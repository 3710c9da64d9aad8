from fastapi import APIRouter, Depends

from restodesk.api.deps import require_staff
from restodesk.core.security import RequestContext
from restodesk.schemas.response import SuccessResponse
from restodesk.schemas.restaurant import RestaurantResponse
from restodesk.services.restaurant_service import my_restaurant, search_restaurants

router = APIRouter()


@router.get("/search", response_model=SuccessResponse)
async def search_endpoint(q: str = ""):
    """Public search by name or CIF, used by the booking page."""
    restaurants = await search_restaurants(q)
    return SuccessResponse(data=[RestaurantResponse.model_validate(r).model_dump() for r in restaurants])


@router.get("/mine", response_model=SuccessResponse)
async def my_restaurant_endpoint(ctx: RequestContext = Depends(require_staff)):
    restaurant = await my_restaurant(ctx)
    return SuccessResponse(data=RestaurantResponse.model_validate(restaurant).model_dump() if restaurant else None)
