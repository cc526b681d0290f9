# backend/services/balance.py
"""Balance store: authoritative quantity per (product, location).

All writes go through ``apply_delta`` and happen inside the caller's
transaction; nothing here commits. Balances are never cached between
requests, every call reads the current row.
"""
import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from models.stock import StockItem
from models.warehouse import Location
from services.exceptions import InsufficientStock

logger = logging.getLogger(__name__)


def get_balance(db: Session, product_id: int, location_id: int) -> float:
    """Current quantity of a product at a location, 0 when no row exists."""
    qty = (
        db.query(StockItem.quantity)
        .filter(StockItem.product_id == product_id, StockItem.location_id == location_id)
        .scalar()
    )
    return qty if qty is not None else 0.0


def list_balances(db: Session, product_id: int):
    return (
        db.query(StockItem)
        .options(joinedload(StockItem.location))
        .filter(StockItem.product_id == product_id)
        .order_by(StockItem.location_id)
        .all()
    )


def _locked_row(db: Session, product_id: int, location_id: int):
    # Row lock held until the enclosing transaction ends (no-op on SQLite,
    # where the engine takes the database write lock at BEGIN instead)
    return (
        db.query(StockItem)
        .filter(StockItem.product_id == product_id, StockItem.location_id == location_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def apply_delta(db: Session, product_id: int, location: Location, delta: float) -> StockItem:
    """Add ``delta`` (signed) to the balance of ``product_id`` at ``location``.

    Raises InsufficientStock when the result would be negative at a physical
    location. Virtual locations (vendor, customer, inventory loss) accept any
    balance.
    """
    virtual = location.is_virtual
    item = _locked_row(db, product_id, location.id)

    if item is None:
        if delta < 0 and not virtual:
            raise InsufficientStock(product_id, location.id, 0.0, -delta, location.name)
        try:
            with db.begin_nested():
                item = StockItem(product_id=product_id, location_id=location.id, quantity=delta)
                db.add(item)
            logger.debug("balance created product=%s location=%s qty=%s", product_id, location.id, delta)
            return item
        except IntegrityError:
            # A concurrent transaction created the row first
            item = _locked_row(db, product_id, location.id)

    stmt = update(StockItem).where(
        StockItem.product_id == product_id,
        StockItem.location_id == location.id,
    )
    if not virtual:
        # Guarded write: the row is only touched if the result stays >= 0
        stmt = stmt.where(StockItem.quantity + delta >= 0)
    result = db.execute(
        stmt.values(quantity=StockItem.quantity + delta).execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise InsufficientStock(product_id, location.id, item.quantity, -delta, location.name)

    db.refresh(item)
    logger.debug("balance product=%s location=%s delta=%s -> %s", product_id, location.id, delta, item.quantity)
    return item
