# backend/utils/audit.py
import logging

from sqlalchemy.orm import Session
from models.log import Log

logger = logging.getLogger(__name__)

# Audit rows are committed on their own, after the business transaction finished.
def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", reference=None, ip=None, meta=None):
    entry = Log(
        user_id=user_id, action=action, resource=resource, status=status,
        reference=reference, ip=ip, meta=meta or {},
    )
    db.add(entry)
    db.commit()
    logger.debug("audit %s %s %s ref=%s", action, resource, status, reference)
