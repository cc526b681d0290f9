import os
import sys
from datetime import timedelta

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.users import User
from models.product import Product
from models.contact import Contact, ContactType
from models.warehouse import Warehouse, Location, LocationType
from models.operation import OperationType
from services.movement import MoveRequest, record_movement
from utils.tokenJWT import create_access_token

# Configuration
ADMIN_EMAIL = "admin@stockmaster.com"
PRODUCTS = [
    # sku, name, category, cost, price, initial receipt
    ("PROD-001", "Laptop", "Electronics", 950.0, 1299.99, 50),
    ("PROD-002", "Wireless Mouse", "Accessories", 12.5, 29.99, 200),
    ("PROD-003", "Mechanical Keyboard", "Accessories", 45.0, 89.99, 100),
    ("PROD-004", "USB-C Dock", "Electronics", 80.0, 149.0, 0),
]
# End Configuration


def _get_or_create(session, model, defaults=None, **filters):
    obj = session.query(model).filter_by(**filters).first()
    if obj:
        return obj
    obj = model(**filters, **(defaults or {}))
    session.add(obj)
    session.flush()
    return obj


def seed():
    """Creates master data and books initial stock through receipts."""
    init_db()
    session = SessionLocal()
    try:
        admin = _get_or_create(session, User, email=ADMIN_EMAIL,
                               defaults={"role": "ADMIN", "first_name": "Admin", "last_name": "User"})

        wh = _get_or_create(session, Warehouse, short_code="WH",
                            defaults={"name": "Main Warehouse", "address": "123 Main St"})
        stock = _get_or_create(session, Location, name="WH/Stock", defaults={"type": LocationType.INTERNAL, "warehouse_id": wh.id})
        _get_or_create(session, Location, name="WH/Shelf A", defaults={"type": LocationType.INTERNAL, "warehouse_id": wh.id})
        vendors = _get_or_create(session, Location, name="Partners/Vendors", defaults={"type": LocationType.VENDOR})
        _get_or_create(session, Location, name="Partners/Customers", defaults={"type": LocationType.CUSTOMER})
        _get_or_create(session, Location, name="Virtual/Inventory loss", defaults={"type": LocationType.INVENTORY_LOSS})

        supplier = _get_or_create(session, Contact, name="Azure Interior", defaults={"type": ContactType.VENDOR})
        _get_or_create(session, Contact, name="Deco Addict", defaults={"type": ContactType.CUSTOMER})

        new_products = []
        for sku, name, category, cost, price, qty in PRODUCTS:
            if session.query(Product).filter(Product.sku == sku).first():
                continue
            session.add(Product(sku=sku, name=name, category=category,
                                cost_price=cost, selling_price=price, on_hand=0))
            new_products.append((sku, qty))
        session.commit()

        # Initial stock goes through the ledger like any other receipt
        for sku, qty in new_products:
            if qty <= 0:
                continue
            op = record_movement(session, MoveRequest(
                sku=sku, quantity=qty, type=OperationType.RECEIPT,
                source_location_id=vendors.id, destination_location_id=stock.id,
                contact_id=supplier.id, notes="Initial stock",
            ), user_id=admin.id)
            print(f"{op.reference}: {qty} x {sku}")

        token = create_access_token({"sub": admin.email, "role": admin.role}, expires_delta=timedelta(days=7))
        print(f"Admin token ({ADMIN_EMAIL}):\n{token}")
    finally:
        session.close()


if __name__ == "__main__":
    seed()
