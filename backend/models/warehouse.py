# backend/models/warehouse.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base

# Location kinds. Everything except INTERNAL is a virtual endpoint for the outside world.
class LocationType(str, enum.Enum):
    INTERNAL = "INTERNAL"
    VENDOR = "VENDOR"
    CUSTOMER = "CUSTOMER"
    INVENTORY_LOSS = "INVENTORY_LOSS"

VIRTUAL_LOCATION_TYPES = frozenset({LocationType.VENDOR, LocationType.CUSTOMER, LocationType.INVENTORY_LOSS})


# Physical site grouping internal locations
class Warehouse(Base):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    short_code = Column(String, unique=True, nullable=False, index=True)
    address = Column(String, nullable=True)

    locations = relationship("Location", back_populates="warehouse")


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(Enum(LocationType), nullable=False, default=LocationType.INTERNAL)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=True, index=True)

    warehouse = relationship("Warehouse", back_populates="locations")

    __table_args__ = (
        # Internal locations must belong to a warehouse
        CheckConstraint(
            "type != 'INTERNAL' OR warehouse_id IS NOT NULL",
            name="ck_location_internal_has_warehouse",
        ),
    )

    @property
    def is_virtual(self) -> bool:
        return self.type in VIRTUAL_LOCATION_TYPES
