# backend/routes/settings.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.contact import Contact
from models.users import User
from models.warehouse import Warehouse, Location, LocationType
from utils.tokenJWT import role_required, STOCK_ROLES, MANAGER_ROLES
from utils.audit import write_log
import schemas.warehouse as wh_schemas

router = APIRouter(prefix="/settings", tags=["Settings"])


# ===== WAREHOUSES =====

@router.post("/warehouses", response_model=wh_schemas.WarehouseOut, status_code=201)
def create_warehouse(
    payload: wh_schemas.WarehouseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*MANAGER_ROLES)),
):
    short_code = payload.short_code.strip().upper()
    if db.query(Warehouse).filter(Warehouse.short_code == short_code).first():
        raise HTTPException(status_code=400, detail="Short code already exists")

    warehouse = Warehouse(name=payload.name, short_code=short_code, address=payload.address)
    db.add(warehouse)
    db.commit()
    db.refresh(warehouse)
    write_log(db, user_id=current_user.id, action="WAREHOUSE_CREATE", resource="settings",
              meta={"id": warehouse.id, "short_code": short_code})
    return warehouse


@router.get("/warehouses/{warehouse_id}", response_model=wh_schemas.WarehouseOut)
def get_warehouse(
    warehouse_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*STOCK_ROLES)),
):
    warehouse = db.get(Warehouse, warehouse_id)
    if not warehouse:
        raise HTTPException(status_code=404, detail="Warehouse not found")
    return warehouse


# ===== LOCATIONS =====

@router.post("/locations", response_model=wh_schemas.LocationOut, status_code=201)
def create_location(
    payload: wh_schemas.LocationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*MANAGER_ROLES)),
):
    if payload.type == LocationType.INTERNAL:
        if payload.warehouse_id is None:
            raise HTTPException(status_code=400, detail="Internal locations require a warehouse")
        if not db.get(Warehouse, payload.warehouse_id):
            raise HTTPException(status_code=404, detail="Warehouse not found")

    location = Location(name=payload.name, type=payload.type, warehouse_id=payload.warehouse_id)
    db.add(location)
    db.commit()
    db.refresh(location)
    write_log(db, user_id=current_user.id, action="LOCATION_CREATE", resource="settings",
              meta={"id": location.id, "type": location.type.value})
    return location


@router.get("/locations/{location_id}", response_model=wh_schemas.LocationOut)
def get_location(
    location_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*STOCK_ROLES)),
):
    location = db.get(Location, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


# ===== CONTACTS =====

@router.post("/contacts", response_model=wh_schemas.ContactOut, status_code=201)
def create_contact(
    payload: wh_schemas.ContactCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*MANAGER_ROLES)),
):
    contact = Contact(**payload.model_dump())
    db.add(contact)
    db.commit()
    db.refresh(contact)
    write_log(db, user_id=current_user.id, action="CONTACT_CREATE", resource="settings",
              meta={"id": contact.id, "type": contact.type.value})
    return contact
