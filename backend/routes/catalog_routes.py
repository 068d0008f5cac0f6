from fastapi import APIRouter
from pydantic import BaseModel

from backend.core.catalog import get_catalog
from backend.core.config import BOOKING_WINDOW_DAYS, SLOT_HOURS, Slot
from backend.models.appointment import VehicleCondition

router = APIRouter(tags=['catalog'])


class CatalogItemResponse(BaseModel):
    id: str
    name: str
    price: int
    description: str = ''


class SlotOptionResponse(BaseModel):
    slot: str
    hours: str


class CatalogResponse(BaseModel):
    packages: list[CatalogItemResponse]
    addons: list[CatalogItemResponse]
    conditions: list[str]
    slots: list[SlotOptionResponse]
    booking_window_days: int


def to_item_response(item) -> CatalogItemResponse:
    return CatalogItemResponse(id=item.id, name=item.name, price=item.price, description=item.description)


@router.get('', response_model=CatalogResponse)
def get_booking_catalog():
    catalog = get_catalog()
    return CatalogResponse(
        packages=[to_item_response(item) for item in catalog.packages],
        addons=[to_item_response(item) for item in catalog.addons],
        conditions=[condition.value for condition in VehicleCondition],
        slots=[SlotOptionResponse(slot=slot.value, hours=SLOT_HOURS[slot]) for slot in Slot],
        booking_window_days=BOOKING_WINDOW_DAYS,
    )
