# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Model Product
# Catalog entry with pricing. `on_hand` is a cached projection of the
# stock_items table (physical locations only) and is only ever written by
# services.aggregate.recompute_on_hand.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=True, index=True)

    cost_price = Column(Float, CheckConstraint("cost_price >= 0"), nullable=False, default=0)
    selling_price = Column(Float, CheckConstraint("selling_price >= 0"), nullable=False, default=0)

    on_hand = Column(Float, CheckConstraint("on_hand >= 0"), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    stock_items = relationship("StockItem", back_populates="product")
