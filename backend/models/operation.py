# backend/models/operation.py
import enum
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Text, Enum, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

class OperationType(str, enum.Enum):
    RECEIPT = "RECEIPT"        # vendor -> warehouse
    DELIVERY = "DELIVERY"      # warehouse -> customer
    INTERNAL = "INTERNAL"      # warehouse -> warehouse
    ADJUSTMENT = "ADJUSTMENT"  # inventory correction

class OperationStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    WAITING = "WAITING"
    READY = "READY"
    DONE = "DONE"
    CANCELLED = "CANCELLED"

# Reference prefixes, e.g. WH/IN/20240101120000-1A2B3C
REFERENCE_PREFIXES = {
    OperationType.RECEIPT: "WH/IN",
    OperationType.DELIVERY: "WH/OUT",
    OperationType.INTERNAL: "WH/INT",
    OperationType.ADJUSTMENT: "WH/ADJ",
}


# Ledger entry for one stock movement. Rows in DONE status are permanent history.
class Operation(Base):
    __tablename__ = "operations"

    id = Column(Integer, primary_key=True, index=True)
    reference = Column(String(64), unique=True, nullable=False, index=True)
    type = Column(Enum(OperationType), nullable=False, index=True)
    status = Column(Enum(OperationStatus), nullable=False, default=OperationStatus.DRAFT, index=True)
    scheduled_date = Column(DateTime(timezone=True), nullable=True)

    source_location_id = Column(Integer, ForeignKey("locations.id"), nullable=True)
    destination_location_id = Column(Integer, ForeignKey("locations.id"), nullable=True)
    contact_id = Column(Integer, ForeignKey("contacts.id"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    done_at = Column(DateTime(timezone=True), nullable=True)

    source_location = relationship("Location", foreign_keys=[source_location_id])
    destination_location = relationship("Location", foreign_keys=[destination_location_id])
    contact = relationship("Contact")
    user = relationship("User")

    # Lines are removed with the operation; ledger.delete_operation only allows this for DRAFT
    lines = relationship(
        "OperationLine",
        back_populates="operation",
        cascade="all, delete-orphan",
        order_by="OperationLine.id",
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in (OperationStatus.DONE, OperationStatus.CANCELLED)


class OperationLine(Base):
    __tablename__ = "operation_lines"

    id = Column(Integer, primary_key=True, index=True)
    operation_id = Column(Integer, ForeignKey("operations.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    demand_qty = Column(Float, CheckConstraint("demand_qty > 0"), nullable=False)
    done_qty = Column(Float, CheckConstraint("done_qty >= 0"), nullable=False, default=0)

    operation = relationship("Operation", back_populates="lines")
    product = relationship("Product")

    @property
    def is_complete(self) -> bool:
        return self.done_qty == self.demand_qty
