# backend/models/stock.py
from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

# Balance of one product at one location.
# Only services.balance writes this table. Quantity may be negative at
# virtual locations only; the guard lives in apply_delta because the sign
# rule depends on the location type.
class StockItem(Base):
    __tablename__ = "stock_items"

    product_id = Column(Integer, ForeignKey("products.id"), primary_key=True)
    location_id = Column(Integer, ForeignKey("locations.id"), primary_key=True, index=True)
    quantity = Column(Float, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    product = relationship("Product", back_populates="stock_items")
    location = relationship("Location")
