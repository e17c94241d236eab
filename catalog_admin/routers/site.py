from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from catalog_admin.db.session import get_db
from catalog_admin.routers.responses import success
from catalog_admin.schemas import CatalogueRequestCreate, NewsletterSubscribe
from catalog_admin.services import leads as lead_store
from catalog_admin.services import newsletter as newsletter_store

router = APIRouter(prefix="/api", tags=["Site"])


@router.post("/catalogue-requests", status_code=status.HTTP_201_CREATED)
def request_catalogue(payload: CatalogueRequestCreate, db: Session = Depends(get_db)):
    lead = lead_store.create_lead(db, payload.model_dump())
    return success(lead_store.serialize_lead(lead), message="Catalogue request received")


@router.post("/newsletter", status_code=status.HTTP_201_CREATED)
def subscribe_newsletter(payload: NewsletterSubscribe, db: Session = Depends(get_db)):
    entry = newsletter_store.subscribe(db, payload.email)
    return success(newsletter_store.serialize_email(entry), message="Subscribed successfully")
