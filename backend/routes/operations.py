# backend/routes/operations.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from services import ledger, workflow
from utils.tokenJWT import role_required, STOCK_ROLES, MANAGER_ROLES
from utils.audit import write_log
import schemas.operation as op_schemas

router = APIRouter(prefix="/operations", tags=["Operations"])

def _client_ip(request: Request):
    return request.client.host if request.client else None


# Plan a staged operation (DRAFT); stock is untouched until it is validated
@router.post("", response_model=op_schemas.OperationOut, status_code=201)
def create_operation(
    payload: op_schemas.DraftCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*STOCK_ROLES)),
):
    draft = workflow.DraftRequest(
        type=payload.type,
        lines=[workflow.LineRequest(**line.model_dump()) for line in payload.lines],
        **payload.model_dump(exclude={"type", "lines"}),
    )
    operation = workflow.create_draft(db, draft, user_id=current_user.id)
    write_log(db, user_id=current_user.id, action="OPERATION_CREATE", resource="operation",
              reference=operation.reference, ip=_client_ip(request), meta={"id": operation.id})
    return operation


@router.get("/{operation_id}", response_model=op_schemas.OperationOut)
def get_operation(
    operation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*STOCK_ROLES)),
):
    return ledger.get_operation(db, operation_id)


# Status machine: DRAFT -> WAITING -> READY -> DONE, CANCELLED from any open state
@router.patch("/{operation_id}/status", response_model=op_schemas.OperationOut)
def update_operation_status(
    operation_id: int,
    payload: op_schemas.StatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*STOCK_ROLES)),
):
    operation = workflow.change_status(db, operation_id, payload.status)
    write_log(db, user_id=current_user.id, action="OPERATION_STATUS", resource="operation",
              reference=operation.reference, ip=_client_ip(request),
              meta={"id": operation.id, "new": payload.status.value})
    return operation


@router.patch("/{operation_id}/lines/{line_id}", response_model=op_schemas.OperationOut)
def update_line_done(
    operation_id: int,
    line_id: int,
    payload: op_schemas.LineDoneUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*STOCK_ROLES)),
):
    return workflow.set_line_done(db, operation_id, line_id, payload.done_qty)


@router.delete("/{operation_id}")
def delete_operation(
    operation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(*MANAGER_ROLES)),
):
    reference = workflow.delete_draft(db, operation_id)
    write_log(db, user_id=current_user.id, action="OPERATION_DELETE", resource="operation",
              reference=reference, ip=_client_ip(request), meta={"id": operation_id})
    return {"message": "Operation deleted successfully"}
