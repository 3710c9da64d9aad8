from typing import List, Optional

from tortoise.expressions import Q

from restodesk.core.config import RESTAURANT_SEARCH_LIMIT
from restodesk.core.security import RequestContext
from restodesk.models.restaurant import Restaurant


async def search_restaurants(q: str) -> List[Restaurant]:
    """Public lookup of active restaurants by name or CIF."""
    q = (q or "").strip()
    if not q:
        return []
    return await (
        Restaurant.filter(Q(name__icontains=q) | Q(cif__icontains=q), active=True)
        .order_by("name")
        .limit(RESTAURANT_SEARCH_LIMIT)
    )


async def my_restaurant(ctx: RequestContext) -> Optional[Restaurant]:
    if not ctx.restaurant_id:
        return None
    return await Restaurant.get_or_none(id=ctx.restaurant_id, active=True)
