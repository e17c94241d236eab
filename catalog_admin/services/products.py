import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from catalog_admin.core.errors import NotFound
from catalog_admin.core.text import like_pattern, render_rich_text
from catalog_admin.db.models import Product

logger = logging.getLogger("catalog_admin.products")

MEDIA_LIST_KEYS = ("images", "models", "charts", "schematics", "dimensions", "videos", "documents", "catalogues")


def serialize_product(product: Product, *, include_html: bool = False) -> Dict[str, Any]:
    payload = {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "subcategory": product.subcategory,
        "status": product.status,
        "data": product.data or {},
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }
    if include_html:
        payload["description_html"] = str(render_rich_text(product.description))
    return payload


def primary_image(product: Product) -> Optional[str]:
    images = (product.data or {}).get("images") or []
    return images[0] if images else None


def count_media_files(data: Optional[Mapping[str, Any]]) -> int:
    if not data:
        return 0
    return sum(len(data.get(key) or []) for key in MEDIA_LIST_KEYS)


def _ordered(query):
    return query.order_by(Product.updated_at.desc(), Product.id.desc())


def get_products(db: Session) -> List[Product]:
    return list(db.scalars(_ordered(select(Product))).all())


def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.get(Product, product_id)


def search_products(db: Session, query: str) -> List[Product]:
    pattern = like_pattern(query)
    stmt = select(Product).where(
        or_(
            Product.name.ilike(pattern, escape="\\"),
            Product.description.ilike(pattern, escape="\\"),
            Product.category.ilike(pattern, escape="\\"),
        )
    )
    return list(db.scalars(_ordered(stmt)).all())


def get_products_by_category(db: Session, category: str) -> List[Product]:
    return list(db.scalars(_ordered(select(Product).where(Product.category == category))).all())


def get_products_by_status(db: Session, status: str) -> List[Product]:
    return list(db.scalars(_ordered(select(Product).where(Product.status == status))).all())


def create_product(db: Session, data: Mapping[str, Any]) -> Product:
    product = Product(
        name=data["name"],
        description=data.get("description") or None,
        category=data["category"],
        subcategory=data.get("subcategory") or None,
        status=data.get("status") or "Draft",
        data=dict(data.get("data") or {}),
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info(
        "product_created",
        extra={"product_id": product.id, "category": product.category, "subcategory": product.subcategory},
    )
    return product


def update_product(db: Session, product_id: int, updates: Mapping[str, Any]) -> Product:
    """Apply a partial update: only fields present in ``updates`` are touched.

    Empty names, categories, statuses and bundles are ignored; an empty
    subcategory clears the product's subcategory.
    """
    product = get_product(db, product_id)
    if not product:
        raise NotFound("Product not found")

    changed: List[str] = []
    for key in ("name", "category", "status"):
        if updates.get(key):
            setattr(product, key, updates[key])
            changed.append(key)
    if "description" in updates:
        product.description = updates["description"]
        changed.append("description")
    if "subcategory" in updates:
        product.subcategory = updates["subcategory"] or None
        changed.append("subcategory")
    if updates.get("data"):
        product.data = dict(updates["data"])
        changed.append("data")

    db.commit()
    db.refresh(product)
    logger.info("product_updated", extra={"product_id": product.id, "fields": changed})
    return product


def delete_product(db: Session, product_id: int) -> None:
    """Delete the product row. Files referenced by its bundle stay in storage."""
    product = get_product(db, product_id)
    if not product:
        raise NotFound("Product not found")

    db.delete(product)
    db.commit()
    logger.info("product_deleted", extra={"product_id": product_id})
