# backend/schemas/stock.py
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Optional

from models.operation import OperationType
from models.warehouse import LocationType

# Request body for a single stock movement (auto-completed on creation).
# Quantity is checked by the ledger itself so that every caller gets the same error.
class MoveCreate(BaseModel):
    sku: Optional[str] = None
    product_id: Optional[int] = None
    quantity: float
    type: OperationType
    source_location_id: Optional[int] = None
    destination_location_id: Optional[int] = None
    contact_id: Optional[int] = None
    scheduled_date: Optional[datetime] = None
    notes: Optional[str] = None

# Balance of one product at one location
class BalanceOut(BaseModel):
    location_id: int
    location_name: str
    location_type: LocationType
    quantity: float

    model_config = ConfigDict(from_attributes=True)

# All balances of a product next to its cached total
class ProductBalances(BaseModel):
    product_id: int
    sku: str
    on_hand: float
    balances: List[BalanceOut]
