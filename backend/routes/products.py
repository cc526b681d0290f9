# backend/routes/products.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.users import User
from services.aggregate import reconcile_all
from services.movement import normalize_sku
from utils.tokenJWT import get_current_user, STOCK_ROLES, MANAGER_ROLES
from utils.audit import write_log
import schemas.product as product_schemas

router = APIRouter(tags=["Products"])

# ---- HELPERS ----
def _can_view(user: User) -> bool:
    return (user.role or "").upper() in STOCK_ROLES

def _can_edit(user: User) -> bool:
    return (user.role or "").upper() in MANAGER_ROLES


# =========================
# CREATE PRODUCT
# =========================
@router.post("/products", response_model=product_schemas.ProductOut, status_code=201)
def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not _can_edit(current_user):
        raise HTTPException(status_code=403, detail="Not authorized to add products")

    sku = normalize_sku(payload.sku)
    if not sku:
        raise HTTPException(status_code=400, detail="SKU is required")
    if db.query(Product).filter(Product.sku == sku).first():
        raise HTTPException(status_code=409, detail="SKU already exists")

    # on_hand starts at zero; stock only arrives through movements
    new_product = Product(**payload.model_dump(exclude={"sku"}), sku=sku, on_hand=0)
    db.add(new_product)
    db.commit()
    db.refresh(new_product)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", meta={"id": new_product.id, "sku": new_product.sku}
    )
    return new_product


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/products/{product_id}", response_model=product_schemas.ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    if not _can_view(current_user):
        raise HTTPException(status_code=403, detail="Not authorized")

    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# =========================
# PARTIAL PRODUCT EDIT (PATCH)
# =========================
@router.patch("/products/{product_id}", response_model=product_schemas.ProductOut)
def edit_product(
    product_id: int,
    payload: product_schemas.ProductEditRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not _can_edit(current_user):
        raise HTTPException(status_code=403, detail="Not authorized")

    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    # SKU and on_hand are not part of the edit schema
    changes = payload.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(product, key, value)
    db.commit()
    db.refresh(product)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
        status="SUCCESS", meta={"id": product.id, "fields": sorted(changes)}
    )
    return product


# =========================
# RECONCILIATION (on_hand vs balances)
# =========================
@router.post("/products/reconcile", response_model=product_schemas.ReconcileResult)
def reconcile_products(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Recompute every product's on_hand from its balances and report drift."""
    if not _can_edit(current_user):
        raise HTTPException(status_code=403, detail="Not authorized")

    checked = db.query(Product).count()
    drifted = reconcile_all(db)
    write_log(
        db, user_id=current_user.id, action="STOCK_RECONCILE", resource="products",
        status="SUCCESS", ip=request.client.host if request.client else None,
        meta={"checked": checked, "drifted": len(drifted)},
    )
    return {"checked": checked, "drifted": drifted}
