# backend/services/ledger.py
"""Operation ledger: operation records, their lines and the status machine.

Functions here stage changes on the session and never commit; the caller
owns the transaction.
"""
import math
import numbers
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from models.operation import (
    Operation, OperationLine, OperationStatus, OperationType, REFERENCE_PREFIXES,
)
from services.exceptions import InvalidQuantity, InvalidState, OperationNotFound

# DONE and CANCELLED are terminal
ALLOWED_TRANSITIONS = {
    OperationStatus.DRAFT: {OperationStatus.WAITING, OperationStatus.CANCELLED},
    OperationStatus.WAITING: {OperationStatus.READY, OperationStatus.CANCELLED},
    OperationStatus.READY: {OperationStatus.DONE, OperationStatus.CANCELLED},
    OperationStatus.DONE: set(),
    OperationStatus.CANCELLED: set(),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_reference(op_type: OperationType, now: Optional[datetime] = None) -> str:
    """Human readable, time based and unique: WH/OUT/20240315093000-9F2C1A."""
    now = now or utcnow()
    return f"{REFERENCE_PREFIXES[op_type]}/{now:%Y%m%d%H%M%S}-{uuid.uuid4().hex[:6].upper()}"


def can_transition(current: OperationStatus, new: OperationStatus) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, set())


def check_transition(operation: Operation, new_status: OperationStatus) -> None:
    if not can_transition(operation.status, new_status):
        raise InvalidState(
            f"Cannot transition operation {operation.reference} "
            f"from {operation.status.value} to {new_status.value}"
        )


def get_operation(db: Session, operation_id: int, lock: bool = False) -> Operation:
    query = db.query(Operation).filter(Operation.id == operation_id)
    if lock:
        query = query.with_for_update()
    operation = query.first()
    if operation is None:
        raise OperationNotFound(operation_id)
    return operation


def create_operation(
    db: Session,
    *,
    op_type: OperationType,
    status: OperationStatus = OperationStatus.DRAFT,
    source_location_id: Optional[int] = None,
    destination_location_id: Optional[int] = None,
    contact_id: Optional[int] = None,
    scheduled_date: Optional[datetime] = None,
    notes: Optional[str] = None,
    user_id: Optional[int] = None,
) -> Operation:
    now = utcnow()
    operation = Operation(
        reference=new_reference(op_type, now),
        type=op_type,
        status=status,
        scheduled_date=scheduled_date or now,
        source_location_id=source_location_id,
        destination_location_id=destination_location_id,
        contact_id=contact_id,
        notes=notes,
        user_id=user_id,
        done_at=now if status == OperationStatus.DONE else None,
    )
    db.add(operation)
    db.flush()
    return operation


def create_line(
    db: Session,
    operation: Operation,
    product_id: int,
    demand_qty: float,
    done_qty: Optional[float] = None,
) -> OperationLine:
    """Append a line. ``done_qty`` defaults to ``demand_qty`` (auto-complete flow)."""
    # A terminal operation only accepts the line it is being created with
    if operation.is_terminal and operation.lines:
        raise InvalidState(f"Operation {operation.reference} is {operation.status.value}; lines are frozen")
    if demand_qty <= 0:
        raise InvalidQuantity(demand_qty)
    if done_qty is None:
        done_qty = demand_qty
    _check_done_qty(operation, demand_qty, done_qty)

    line = OperationLine(product_id=product_id, demand_qty=demand_qty, done_qty=done_qty)
    operation.lines.append(line)
    db.flush()
    return line


def _check_done_qty(operation: Operation, demand_qty: float, done_qty: float) -> None:
    # NaN and inf would slip past both comparisons below
    if isinstance(done_qty, bool) or not isinstance(done_qty, numbers.Real):
        raise InvalidQuantity(done_qty)
    if not math.isfinite(done_qty) or done_qty < 0:
        raise InvalidQuantity(done_qty)
    if operation.type != OperationType.ADJUSTMENT and done_qty > demand_qty:
        raise InvalidState(f"Done quantity {done_qty:g} exceeds demand {demand_qty:g}")


def set_done_qty(db: Session, operation: Operation, line_id: int, done_qty: float) -> OperationLine:
    if operation.is_terminal:
        raise InvalidState(f"Operation {operation.reference} is {operation.status.value}; lines are frozen")
    line = next((l for l in operation.lines if l.id == line_id), None)
    if line is None:
        raise OperationNotFound(f"{operation.id} line {line_id}")
    _check_done_qty(operation, line.demand_qty, done_qty)
    line.done_qty = done_qty
    db.flush()
    return line


def incomplete_lines(operation: Operation):
    if operation.type == OperationType.ADJUSTMENT:
        return []
    return [line for line in operation.lines if not line.is_complete]


def delete_operation(db: Session, operation: Operation) -> None:
    """Remove a DRAFT operation and its lines. Anything else is ledger history."""
    if operation.status != OperationStatus.DRAFT:
        raise InvalidState(
            f"Only DRAFT operations can be deleted; {operation.reference} is {operation.status.value}"
        )
    db.delete(operation)
    db.flush()
