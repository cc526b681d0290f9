# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional, List


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Shared base attributes for product entities
class ProductBase(ORMBase):
    name: str
    category: Optional[str] = None
    cost_price: float = Field(default=0, ge=0)
    selling_price: float = Field(default=0, ge=0)


# Schema for creating a new product. Stock is only added through movements.
class ProductCreate(ProductBase):
    sku: str = Field(min_length=1)


# Schema for partial product updates; SKU and on_hand are not editable
class ProductEditRequest(ORMBase):
    name: Optional[str] = Field(None, description="Product name")
    category: Optional[str] = None
    cost_price: Optional[float] = Field(None, ge=0)
    selling_price: Optional[float] = Field(None, ge=0)


# Full product representation including the cached stock total
class ProductOut(ProductBase):
    id: int
    sku: str
    on_hand: float
    created_at: Optional[datetime] = None


# One product whose cached on_hand differed from its balances
class ReconcileDrift(BaseModel):
    product_id: int
    sku: str
    cached: float
    actual: float


class ReconcileResult(BaseModel):
    checked: int
    drifted: List[ReconcileDrift]
