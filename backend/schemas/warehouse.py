# backend/schemas/warehouse.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional

from models.contact import ContactType
from models.warehouse import LocationType


class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class WarehouseCreate(BaseModel):
    name: str = Field(min_length=1)
    short_code: str = Field(min_length=1, max_length=10)
    address: Optional[str] = None

class WarehouseOut(ORMBase):
    id: int
    name: str
    short_code: str
    address: Optional[str] = None

# warehouse_id is required for INTERNAL locations (checked in the route)
class LocationCreate(BaseModel):
    name: str = Field(min_length=1)
    type: LocationType = LocationType.INTERNAL
    warehouse_id: Optional[int] = None

class LocationOut(ORMBase):
    id: int
    name: str
    type: LocationType
    warehouse_id: Optional[int] = None
    is_virtual: bool

class ContactCreate(BaseModel):
    name: str = Field(min_length=1)
    type: ContactType
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

class ContactOut(ORMBase):
    id: int
    name: str
    type: ContactType
    email: Optional[str] = None
    phone: Optional[str] = None
