import logging
from typing import Any, Dict, List, Mapping, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog_admin.core.email import notification_recipients, send_email
from catalog_admin.core.errors import NotFound
from catalog_admin.db.models import CatalogueRequest

logger = logging.getLogger("catalog_admin.leads")


def serialize_lead(lead: CatalogueRequest) -> Dict[str, Any]:
    return {
        "id": lead.id,
        "name": lead.name,
        "phone": lead.phone,
        "email": lead.email,
        "location": lead.location,
        "product_id": lead.product_id,
        "product_name": lead.product_name,
        "created_at": lead.created_at,
    }


def count_leads(db: Session) -> int:
    return db.scalar(select(func.count(CatalogueRequest.id))) or 0


def list_leads(db: Session, page: int = 1, limit: int = 50) -> Tuple[List[CatalogueRequest], int]:
    """Return one page of leads, newest first, and the total number of leads."""
    offset = (page - 1) * limit
    rows = db.scalars(
        select(CatalogueRequest)
        .order_by(CatalogueRequest.created_at.desc(), CatalogueRequest.id.desc())
        .offset(offset)
        .limit(limit)
    ).all()
    return list(rows), count_leads(db)


def create_lead(db: Session, data: Mapping[str, Any]) -> CatalogueRequest:
    lead = CatalogueRequest(
        name=data["name"].strip(),
        phone=(data.get("phone") or "").strip() or None,
        email=data["email"].strip(),
        location=(data.get("location") or "").strip() or None,
        product_id=data.get("product_id"),
        product_name=data.get("product_name") or None,
    )
    db.add(lead)
    db.commit()
    db.refresh(lead)

    recipients = notification_recipients()
    if recipients:
        send_email(
            subject=f"New catalogue request from {lead.name}",
            body=(
                f"Name: {lead.name}\nEmail: {lead.email}\nPhone: {lead.phone or '-'}\n"
                f"Location: {lead.location or '-'}\nProduct: {lead.product_name or '-'}"
            ),
            to=recipients,
        )

    logger.info("lead_created", extra={"lead_id": lead.id, "product_id": lead.product_id})
    return lead


def delete_lead(db: Session, lead_id: int) -> None:
    lead = db.get(CatalogueRequest, lead_id)
    if not lead:
        raise NotFound("Lead not found")

    db.delete(lead)
    db.commit()
    logger.info("lead_deleted", extra={"lead_id": lead_id})
