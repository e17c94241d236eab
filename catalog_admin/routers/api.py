import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_admin.core.config import get_settings
from catalog_admin.core.security import require_api_key
from catalog_admin.db.session import get_db
from catalog_admin.routers.responses import failure, success
from catalog_admin.services import dashboard as dashboard_service
from catalog_admin.services import leads as lead_store
from catalog_admin.services import newsletter as newsletter_store

router = APIRouter(prefix="/api", tags=["Reports"], dependencies=[Depends(require_api_key)])

logger = logging.getLogger("catalog_admin.api")


def _server_error(message: str) -> JSONResponse:
    return JSONResponse(failure(message), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/leads")
def list_leads(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
):
    page_size = limit or get_settings().leads_page_size
    try:
        rows, total = lead_store.list_leads(db, page=page, limit=page_size)
    except SQLAlchemyError:
        logger.exception("leads_fetch_failed")
        return _server_error("Failed to fetch leads")

    total_pages = math.ceil(total / page_size)
    return success(
        [lead_store.serialize_lead(row) for row in rows],
        pagination={
            "currentPage": page,
            "totalPages": total_pages,
            "totalCount": total,
            "hasNextPage": page < total_pages,
            "hasPrevPage": page > 1,
            "limit": page_size,
        },
    )


@router.delete("/leads")
def delete_lead(lead_id: Optional[int] = Query(None, alias="id"), db: Session = Depends(get_db)):
    if lead_id is None:
        return JSONResponse(failure("Lead ID is required"), status_code=status.HTTP_400_BAD_REQUEST)
    try:
        lead_store.delete_lead(db, lead_id)
    except SQLAlchemyError:
        logger.exception("lead_delete_failed", extra={"lead_id": lead_id})
        return _server_error("Failed to delete lead")
    return success(message="Lead deleted successfully")


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db)):
    try:
        data = dashboard_service.get_dashboard_stats(db)
    except SQLAlchemyError:
        logger.exception("dashboard_fetch_failed")
        return _server_error("Failed to fetch dashboard data")
    return success(jsonable_encoder(data))


@router.get("/newsletter-emails")
def newsletter_emails(db: Session = Depends(get_db)):
    try:
        rows = newsletter_store.list_newsletter_emails(db)
    except SQLAlchemyError:
        logger.exception("newsletter_fetch_failed")
        return _server_error("Failed to fetch newsletter emails")
    return success([newsletter_store.serialize_email(row) for row in rows])
