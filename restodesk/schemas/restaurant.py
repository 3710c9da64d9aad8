from pydantic import BaseModel, ConfigDict


class RestaurantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    cif: str
    active: bool
    slot_minutes: int
    slot_capacity: int
