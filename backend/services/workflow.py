# backend/services/workflow.py
"""Staged operations: DRAFT -> WAITING -> READY -> DONE.

Unlike ``movement.record_movement`` these operations are planned first and
touch balances only when validated (READY -> DONE). Each function here is one
unit of work: it commits on success and rolls back on any error.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from models.operation import Operation, OperationStatus
from services import ledger, movement
from services.exceptions import InvalidMovement

logger = logging.getLogger(__name__)


@dataclass
class LineRequest:
    demand_qty: float
    product_id: Optional[int] = None
    sku: Optional[str] = None


@dataclass
class DraftRequest:
    type: str
    lines: List[LineRequest] = field(default_factory=list)
    source_location_id: Optional[int] = None
    destination_location_id: Optional[int] = None
    contact_id: Optional[int] = None
    scheduled_date: Optional[datetime] = None
    notes: Optional[str] = None


def create_draft(db: Session, draft: DraftRequest, user_id: Optional[int] = None) -> Operation:
    op_type = movement.check_type(draft.type)
    movement.check_locations(draft.source_location_id, draft.destination_location_id)
    if not draft.lines:
        raise InvalidMovement("At least one product line is required")
    quantities = [movement.check_quantity(line.demand_qty) for line in draft.lines]

    try:
        movement.resolve_location(db, draft.source_location_id)
        movement.resolve_location(db, draft.destination_location_id)
        movement.check_contact(db, draft.contact_id)
        operation = ledger.create_operation(
            db,
            op_type=op_type,
            status=OperationStatus.DRAFT,
            source_location_id=draft.source_location_id,
            destination_location_id=draft.destination_location_id,
            contact_id=draft.contact_id,
            scheduled_date=draft.scheduled_date,
            notes=draft.notes,
            user_id=user_id,
        )
        for line, qty in zip(draft.lines, quantities):
            product = movement.resolve_product(db, line.product_id, line.sku)
            ledger.create_line(db, operation, product.id, qty, done_qty=0)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(operation)
    logger.info("Draft operation %s created with %d line(s)", operation.reference, len(operation.lines))
    return operation


def change_status(db: Session, operation_id: int, new_status) -> Operation:
    """Move an operation along the status machine; validating to DONE applies stock."""
    try:
        new_status = OperationStatus(new_status)
    except ValueError:
        allowed = ", ".join(s.value for s in OperationStatus)
        raise InvalidMovement(f"Status must be one of: {allowed}")

    try:
        operation = ledger.get_operation(db, operation_id, lock=True)
        old_status = operation.status
        ledger.check_transition(operation, new_status)
        if new_status == OperationStatus.DONE:
            movement.apply_operation(db, operation)
            operation.done_at = ledger.utcnow()
        operation.status = new_status
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(operation)
    logger.info("Operation %s: %s -> %s", operation.reference, old_status.value, new_status.value)
    return operation


def set_line_done(db: Session, operation_id: int, line_id: int, done_qty) -> Operation:
    try:
        operation = ledger.get_operation(db, operation_id, lock=True)
        ledger.set_done_qty(db, operation, line_id, done_qty)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(operation)
    return operation


def delete_draft(db: Session, operation_id: int) -> str:
    try:
        operation = ledger.get_operation(db, operation_id, lock=True)
        reference = operation.reference
        ledger.delete_operation(db, operation)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Draft operation %s deleted", reference)
    return reference
