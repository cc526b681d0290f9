# backend/schemas/operation.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional

from models.operation import OperationStatus, OperationType


class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class OperationLineOut(ORMBase):
    id: int
    product_id: int
    demand_qty: float
    done_qty: float

# Operation as recorded in the ledger
class OperationOut(ORMBase):
    id: int
    reference: str
    type: OperationType
    status: OperationStatus
    scheduled_date: Optional[datetime] = None
    source_location_id: Optional[int] = None
    destination_location_id: Optional[int] = None
    contact_id: Optional[int] = None
    user_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    done_at: Optional[datetime] = None
    lines: List[OperationLineOut]

# One planned line of a staged operation
class DraftLineCreate(BaseModel):
    product_id: Optional[int] = None
    sku: Optional[str] = None
    demand_qty: float

# Staged operation, created in DRAFT and validated later
class DraftCreate(BaseModel):
    type: OperationType
    lines: List[DraftLineCreate] = Field(min_length=1)
    source_location_id: Optional[int] = None
    destination_location_id: Optional[int] = None
    contact_id: Optional[int] = None
    scheduled_date: Optional[datetime] = None
    notes: Optional[str] = None

class StatusUpdate(BaseModel):
    status: OperationStatus

class LineDoneUpdate(BaseModel):
    done_qty: float
