import logging
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog_admin.db.models import NewsletterEmail

logger = logging.getLogger("catalog_admin.newsletter")


def serialize_email(entry: NewsletterEmail) -> Dict[str, Any]:
    return {"id": entry.id, "email": entry.email, "created_at": entry.created_at}


def list_newsletter_emails(db: Session) -> List[NewsletterEmail]:
    return list(
        db.scalars(
            select(NewsletterEmail).order_by(NewsletterEmail.created_at.desc(), NewsletterEmail.id.desc())
        ).all()
    )


def subscribe(db: Session, email: str) -> NewsletterEmail:
    """Add an address to the list; an address already on it is returned as is."""
    normalized = email.strip().lower()
    existing = db.scalars(select(NewsletterEmail).where(func.lower(NewsletterEmail.email) == normalized)).first()
    if existing:
        return existing

    entry = NewsletterEmail(email=normalized)
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return db.scalars(select(NewsletterEmail).where(NewsletterEmail.email == normalized)).one()
    db.refresh(entry)
    logger.info("newsletter_subscribed", extra={"subscriber_id": entry.id})
    return entry
