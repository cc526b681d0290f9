# backend/services/aggregate.py
"""Product.on_hand maintenance.

on_hand is the sum of a product's balances over INTERNAL locations. Virtual
locations mirror stock that left or entered the company and are excluded.
"""
import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.product import Product
from models.stock import StockItem
from models.warehouse import Location, LocationType

logger = logging.getLogger(__name__)


def physical_total(db: Session, product_id: int) -> float:
    total = (
        db.query(func.coalesce(func.sum(StockItem.quantity), 0))
        .join(Location, Location.id == StockItem.location_id)
        .filter(StockItem.product_id == product_id, Location.type == LocationType.INTERNAL)
        .scalar()
    )
    return float(total)


def recompute_on_hand(db: Session, product: Product) -> float:
    """Re-sum the balances and store the result on the product (no commit).

    Only INTERNAL locations are summed. Vendor, customer and loss locations
    are counterparts of stock entering or leaving the company: a delivery
    credits the customer location (+q) and leaves on_hand reduced by q, and
    including those balances would cancel every receipt and delivery back
    to zero.
    """
    # Pending balance rows must be visible to the SUM
    db.flush()
    product.on_hand = physical_total(db, product.id)
    db.flush()
    return product.on_hand


def reconcile_all(db: Session) -> List[dict]:
    """Recompute on_hand for every product and commit.

    Returns the products whose cached value had drifted, with old and new values.
    """
    drifted = []
    try:
        for product in db.query(Product).order_by(Product.id).with_for_update().all():
            expected = physical_total(db, product.id)
            if product.on_hand != expected:
                drifted.append({"product_id": product.id, "sku": product.sku,
                                "cached": product.on_hand, "actual": expected})
                product.on_hand = expected
        db.commit()
    except Exception:
        db.rollback()
        raise

    if drifted:
        logger.warning("on_hand drift corrected for %d product(s): %s", len(drifted), drifted)
    return drifted
