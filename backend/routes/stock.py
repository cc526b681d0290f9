# backend/routes/stock.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.users import User
from services.balance import list_balances
from services.exceptions import StockError
from services.movement import MoveRequest, record_movement
from utils.tokenJWT import get_current_user, STOCK_ROLES
from utils.audit import write_log
import schemas.stock as stock_schemas
from schemas.operation import OperationOut

router = APIRouter(tags=["Stock"])

# Check permissions for stock management
def _can_manage_stock(user: User) -> bool:
    return (user.role or "").upper() in STOCK_ROLES

def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/moves", response_model=OperationOut, status_code=201)
def create_move(
    payload: stock_schemas.MoveCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Record a stock movement; the operation is created directly in DONE."""
    if not _can_manage_stock(current_user):
        raise HTTPException(status_code=403, detail="Not authorized")

    move = MoveRequest(**payload.model_dump())
    meta = payload.model_dump(mode="json", exclude_none=True)
    try:
        operation = record_movement(db, move, user_id=current_user.id)
    except StockError as e:
        write_log(db, user_id=current_user.id, action="STOCK_MOVE", resource="stock", status="FAIL",
                  ip=_client_ip(request), meta={**meta, "code": e.code, "reason": e.message})
        raise

    write_log(db, user_id=current_user.id, action="STOCK_MOVE", resource="stock", status="SUCCESS",
              reference=operation.reference, ip=_client_ip(request), meta={**meta, "operation_id": operation.id})
    return operation


@router.get("/balances/{product_id}", response_model=stock_schemas.ProductBalances)
def product_balances(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not _can_manage_stock(current_user):
        raise HTTPException(status_code=403, detail="Not authorized")

    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(404, "Product not found")

    balances = [
        {"location_id": item.location.id, "location_name": item.location.name,
         "location_type": item.location.type, "quantity": item.quantity}
        for item in list_balances(db, product_id)
    ]
    return {"product_id": product.id, "sku": product.sku, "on_hand": product.on_hand, "balances": balances}
