"""Shared seed data for the ledger tests.

Everything here commits and returns plain ids, so callers can hand them to
other sessions (threads, API requests) without touching the seeding session.
"""

from __future__ import annotations

from dataclasses import dataclass

from models.operation import OperationType
from models.product import Product
from models.users import User
from models.warehouse import Location, LocationType, Warehouse
from services.movement import MoveRequest, record_movement


@dataclass
class Seed:
    admin_id: int
    staff_id: int
    viewer_id: int
    warehouse_id: int
    shelf_id: int        # INTERNAL
    bin_id: int          # INTERNAL
    vendor_id: int
    customer_id: int
    loss_id: int
    product_id: int
    sku: str
    other_product_id: int


def seed_master_data(session) -> Seed:
    admin = User(email="admin@example.com", role="ADMIN", first_name="Ada", last_name="Admin")
    staff = User(email="staff@example.com", role="STAFF", first_name="Sam", last_name="Staff")
    viewer = User(email="viewer@example.com", role="VIEWER")
    wh = Warehouse(name="Main Warehouse", short_code="WH", address="1 Dock Rd")
    session.add_all([admin, staff, viewer, wh])
    session.flush()

    shelf = Location(name="WH/Shelf 1", type=LocationType.INTERNAL, warehouse_id=wh.id)
    bin_ = Location(name="WH/Bin 2", type=LocationType.INTERNAL, warehouse_id=wh.id)
    vendor = Location(name="Partners/Vendors", type=LocationType.VENDOR)
    customer = Location(name="Partners/Customers", type=LocationType.CUSTOMER)
    loss = Location(name="Virtual/Inventory loss", type=LocationType.INVENTORY_LOSS)
    widget = Product(sku="SKU-X", name="Widget X", category="Parts", cost_price=2.5, selling_price=4.0, on_hand=0)
    gadget = Product(sku="SKU-Y", name="Gadget Y", category="Parts", cost_price=10, selling_price=15, on_hand=0)
    session.add_all([shelf, bin_, vendor, customer, loss, widget, gadget])
    session.flush()

    seed = Seed(
        admin_id=admin.id, staff_id=staff.id, viewer_id=viewer.id,
        warehouse_id=wh.id, shelf_id=shelf.id, bin_id=bin_.id,
        vendor_id=vendor.id, customer_id=customer.id, loss_id=loss.id,
        product_id=widget.id, sku=widget.sku, other_product_id=gadget.id,
    )
    session.commit()
    return seed


def receive(session, seed: Seed, quantity, location_id=None, product_id=None):
    """RECEIPT into an internal location (shelf by default)."""
    return record_movement(session, MoveRequest(
        quantity=quantity,
        type=OperationType.RECEIPT,
        product_id=product_id or seed.product_id,
        destination_location_id=location_id or seed.shelf_id,
    ))
