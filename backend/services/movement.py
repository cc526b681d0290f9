# backend/services/movement.py
"""Stock movement transaction.

``record_movement`` turns one movement request into a DONE operation, the
balance changes and the on_hand recompute, all in a single commit. Either
everything is persisted or nothing is.

``apply_operation`` applies the lines of a staged operation when it is
validated (READY -> DONE); it reuses the same balance and aggregate steps but
leaves the commit to the caller.
"""
import logging
import math
import numbers
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from models.contact import Contact
from models.operation import Operation, OperationStatus, OperationType
from models.product import Product
from models.warehouse import Location
from services import aggregate, balance, ledger
from services.exceptions import (
    InvalidMovement, InvalidQuantity, InvalidState, LocationNotFound, ProductNotFound,
)

logger = logging.getLogger(__name__)


@dataclass
class MoveRequest:
    quantity: float
    type: OperationType
    product_id: Optional[int] = None
    sku: Optional[str] = None
    source_location_id: Optional[int] = None
    destination_location_id: Optional[int] = None
    contact_id: Optional[int] = None
    scheduled_date: Optional[datetime] = None
    notes: Optional[str] = None


def check_quantity(quantity) -> float:
    # bool is an int subclass, reject it explicitly
    if isinstance(quantity, bool) or not isinstance(quantity, numbers.Real):
        raise InvalidQuantity(quantity)
    value = float(quantity)
    if not math.isfinite(value) or value <= 0:
        raise InvalidQuantity(quantity)
    return value


def check_type(op_type) -> OperationType:
    try:
        return OperationType(op_type)
    except ValueError:
        allowed = ", ".join(t.value for t in OperationType)
        raise InvalidMovement(f"Operation type must be one of: {allowed}")


def check_locations(source_id: Optional[int], destination_id: Optional[int]) -> None:
    if source_id is None and destination_id is None:
        raise InvalidMovement("A movement needs a source or a destination location")
    if source_id is not None and source_id == destination_id:
        raise InvalidMovement("Source and destination locations must be different")


def normalize_sku(sku: Optional[str]) -> Optional[str]:
    """SKUs are stored trimmed and upper case; None for blank input."""
    if sku is None:
        return None
    return sku.strip().upper() or None


def resolve_product(db: Session, product_id: Optional[int] = None, sku: Optional[str] = None) -> Product:
    """Load and lock the product row.

    The lock serializes movements of the same product so that concurrent
    on_hand recomputes cannot overwrite each other.
    """
    query = db.query(Product)
    if product_id is not None:
        query = query.filter(Product.id == product_id)
        ref = product_id
    elif normalize_sku(sku):
        query = query.filter(Product.sku == normalize_sku(sku))
        ref = sku
    else:
        raise InvalidMovement("Either product_id or sku is required")
    product = query.with_for_update().first()
    if product is None:
        raise ProductNotFound(ref)
    return product


def resolve_location(db: Session, location_id: Optional[int]) -> Optional[Location]:
    if location_id is None:
        return None
    location = db.get(Location, location_id)
    if location is None:
        raise LocationNotFound(location_id)
    return location


def check_contact(db: Session, contact_id: Optional[int]) -> None:
    if contact_id is not None and db.get(Contact, contact_id) is None:
        raise InvalidMovement(f"Contact {contact_id} not found")


def move_stock(db: Session, product: Product, quantity: float,
               source: Optional[Location], destination: Optional[Location]) -> None:
    """Credit the destination, then debit the source. No recompute, no commit."""
    if destination is not None:
        balance.apply_delta(db, product.id, destination, quantity)
    if source is not None:
        balance.apply_delta(db, product.id, source, -quantity)


def record_movement(db: Session, move: MoveRequest, user_id: Optional[int] = None) -> Operation:
    """Record a movement as a DONE operation and apply it, atomically.

    Raises InvalidQuantity / InvalidMovement before touching the database,
    ProductNotFound / LocationNotFound on unknown references and
    InsufficientStock when the source cannot cover the quantity. On any error
    the session is rolled back and nothing from this request is persisted.
    """
    quantity = check_quantity(move.quantity)
    op_type = check_type(move.type)
    check_locations(move.source_location_id, move.destination_location_id)

    try:
        product = resolve_product(db, move.product_id, move.sku)
        source = resolve_location(db, move.source_location_id)
        destination = resolve_location(db, move.destination_location_id)
        check_contact(db, move.contact_id)

        operation = ledger.create_operation(
            db,
            op_type=op_type,
            status=OperationStatus.DONE,
            source_location_id=move.source_location_id,
            destination_location_id=move.destination_location_id,
            contact_id=move.contact_id,
            scheduled_date=move.scheduled_date,
            notes=move.notes,
            user_id=user_id,
        )
        ledger.create_line(db, operation, product.id, quantity)

        move_stock(db, product, quantity, source, destination)
        aggregate.recompute_on_hand(db, product)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(operation)
    logger.info(
        "Stock move %s: %s x%g product=%s from=%s to=%s on_hand=%g",
        operation.reference, op_type.value, quantity, product.sku,
        move.source_location_id, move.destination_location_id, product.on_hand,
    )
    return operation


def apply_operation(db: Session, operation: Operation) -> None:
    """Apply the balance effects of a staged operation being validated.

    Every line must be complete (adjustments excepted). Lines are processed
    in product order so concurrent validations lock rows in the same order.
    Caller commits or rolls back.
    """
    missing = ledger.incomplete_lines(operation)
    if missing:
        detail = ", ".join(f"line {l.id}: {l.done_qty:g}/{l.demand_qty:g}" for l in missing)
        raise InvalidState(f"Operation {operation.reference} is not complete ({detail})")
    if not operation.lines:
        raise InvalidState(f"Operation {operation.reference} has no lines")

    check_locations(operation.source_location_id, operation.destination_location_id)
    source = resolve_location(db, operation.source_location_id)
    destination = resolve_location(db, operation.destination_location_id)

    touched = {}
    for line in sorted(operation.lines, key=lambda l: (l.product_id, l.id)):
        if line.done_qty <= 0:
            continue
        product = touched.get(line.product_id) or resolve_product(db, line.product_id)
        touched[product.id] = product
        move_stock(db, product, line.done_qty, source, destination)

    for product in touched.values():
        aggregate.recompute_on_hand(db, product)
